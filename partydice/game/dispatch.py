import re
from typing import Callable, Iterable

from ..models.schemas import ChannelKind, ChatLine
from .base import RoundStateMachine
from .blackjack import BlackjackGame
from .darts import DartsGame
from .beer_pong import BeerPongGame
from .deathroll import DeathrollGame
from .identity import resolve

import logging

log = logging.getLogger(__name__)

# "Random! (1-11) 8"
BLACKJACK_ROLL = re.compile(r"Random! \(1-11\) (\d{1,2})")
# "Random! 589" or "Random! (1-589) 13"
OPEN_ROLL = re.compile(r"Random!(?: \(1-(\d+)\))? (\d+)")
# "Random! (1-100) 78"
DICE_100_ROLL = re.compile(r"Random! \(1-100\) (\d+)")

Command = Callable[[str, str], bool]


class RollDispatcher:
    """Turns chat lines into ``submit_roll`` calls for one game.

    The last capture group of ``pattern`` is the rolled value. Roll lines are
    only forwarded while the game has an active round; ``commands`` (exact,
    case-insensitive message text) are forwarded regardless and the game
    decides whether they apply.
    """

    def __init__(
        self,
        game: RoundStateMachine,
        pattern: re.Pattern,
        channels: Iterable[ChannelKind],
        value_range: tuple[int, int] | Callable[[], tuple[int, int]],
        commands: dict[str, Command] | None = None,
    ):
        self.game = game
        self.pattern = pattern
        self.channels = frozenset(channels)
        self._value_range = value_range
        self.commands = {word.lower(): handler for word, handler in (commands or {}).items()}

    @property
    def value_range(self) -> tuple[int, int]:
        if callable(self._value_range):
            return self._value_range()
        return self._value_range

    def handle(self, line: ChatLine) -> bool:
        if line.channel not in self.channels:
            return False

        text = line.message.strip()
        if not text or not line.sender.strip():
            return False

        key, display = resolve(line.sender)
        if not key:
            return False

        command = self.commands.get(text.lower())
        if command is not None:
            log.debug(f"Captured {text.lower()} from {key}")
            return command(key, display)

        if not self.game.round_active:
            return False

        match = self.pattern.search(text)
        if match is None:
            return False

        value = int(match.group(match.lastindex))
        low, high = self.value_range
        if value < low or value > high:
            return False

        log.debug(f"[{self.game.name}] Captured roll: {display} rolled {value}")
        return self.game.submit_roll(key, value, display)


def blackjack_dispatcher(game: BlackjackGame) -> RollDispatcher:
    return RollDispatcher(
        game,
        BLACKJACK_ROLL,
        channels=[ChannelKind.PARTY],
        value_range=(game.min_card, game.max_card),
        commands={
            "stand": lambda key, display: game.stand(key, display),
            "split": lambda key, display: game.split(key),
        },
    )


def darts_dispatcher(game: DartsGame) -> RollDispatcher:
    return RollDispatcher(
        game,
        OPEN_ROLL,
        channels=[ChannelKind.PARTY, ChannelKind.SAY, ChannelKind.YELL],
        value_range=(game.min_dart, game.max_dart),
    )


def beer_pong_dispatcher(game: BeerPongGame) -> RollDispatcher:
    return RollDispatcher(
        game,
        DICE_100_ROLL,
        channels=[ChannelKind.PARTY],
        value_range=(game.min_roll, game.max_roll),
    )


def deathroll_dispatcher(game: DeathrollGame) -> RollDispatcher:
    return RollDispatcher(
        game,
        OPEN_ROLL,
        channels=[ChannelKind.PARTY],
        value_range=lambda: (1, game.current_max),
    )
