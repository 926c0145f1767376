"""Canonical player identity from noisy chat display names.

Chat senders arrive decorated (party glyphs, brackets) and sometimes with
their home world glued onto the surname ("Asheanei SherSiren"). Every game
keys its participants on the lower-cased "first last" pair returned here.
"""
import re

KNOWN_WORLDS = frozenset(
    [
        "Adamantoise", "Cactuar", "Faerie", "Gilgamesh", "Jenova", "Midgardsormr", "Sargatanas", "Siren",
        "Behemoth", "Excalibur", "Exodus", "Famfrit", "Hyperion", "Lamia", "Leviathan", "Ultros",
        "Balmung", "Brynhildr", "Coeurl", "Diabolos", "Goblin", "Malboro", "Mateus", "Zalera",
        "Halicarnassus", "Maduin", "Marilith", "Seraph", "Cuchulainn", "Golem", "Kraken", "Rafflesia",
        "Anima", "Asura", "Chocobo", "Hades", "Ixion", "Masamune", "Pandaemonium", "Titan",
        "Belias", "Mandragora", "Ramuh", "Shinryu", "Unicorn", "Valefor", "Yojimbo", "Zeromus",
        "Alexander", "Bahamut", "Durandal", "Fenrir", "Ifrit", "Ridill", "Tiamat", "Ultima",
        "Aegis", "Atomos", "Carbuncle", "Garuda", "Gungnir", "Kujata", "Tonberry", "Typhon",
        "Cerberus", "Louisoix", "Moogle", "Omega", "Phantom", "Ragnarok", "Raiden", "Spriggan",
        "Shiva", "Twintania", "Lich", "Odin", "Zodiark",
        "Bismarck", "Ravana", "Sephirot", "Sophia", "Zurvan",
    ]
)

_KNOWN_WORLDS_LOWER = frozenset(world.lower() for world in KNOWN_WORLDS)

# lowercase letter immediately followed by a capitalised world at the end of a token
_GLUED_WORLD = re.compile(
    r"(?<=[a-z])(?:" + "|".join(sorted(KNOWN_WORLDS, key=len, reverse=True)) + r")$"
)


def _strip_decoration(text: str) -> str:
    start = 0
    while start < len(text) and not text[start].isalnum():
        start += 1
    end = len(text)
    while end > start and not text[end - 1].isalnum():
        end -= 1
    return text[start:end]


def resolve(raw: str | None) -> tuple[str, str]:
    """Return ``(key, display)`` for a raw sender or roster name.

    Blank input gives ``("", "")``; callers must drop events with an empty
    key. ``resolve(display)`` always yields the same key again.
    """
    if not raw or not raw.strip():
        return "", ""

    tokens = [_strip_decoration(token) for token in raw.split()]
    tokens = [token for token in tokens if token]
    if not tokens:
        return "", ""

    if len(tokens) > 2 and tokens[-1].lower() in _KNOWN_WORLDS_LOWER:
        tokens.pop()
    tokens = tokens[:2]

    # the kept surname may still carry a glued world, possibly more than once
    last = tokens[-1]
    while True:
        stripped = _GLUED_WORLD.sub("", last)
        if stripped == last:
            break
        last = stripped
    tokens[-1] = last

    display = " ".join(tokens)
    return display.lower(), display


def normalize(raw: str | None) -> str:
    return resolve(raw)[0]
