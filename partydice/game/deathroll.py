from typing import Iterable

from ..models.game import DuelRoll, RoundPhase, RoundResult
from ..models.schemas import DeathrollSnapshot
from .base import Announce, canonical_roster, quiet_announce
from .identity import resolve

import logging

log = logging.getLogger(__name__)


class DeathrollGame:
    """Two players roll under a shrinking ceiling; whoever rolls a 1 loses."""

    name = "Deathroll"

    def __init__(self, announce: Announce | None = None, starting_max: int = 1000):
        self._announce = announce or quiet_announce
        self.starting_max = starting_max

        self.phase = RoundPhase.IDLE
        self._roster: dict[str, str] = {}
        self.challenger: str | None = None
        self.opponent: str | None = None
        self.current_max = starting_max

        self._rolls: list[DuelRoll] = []
        self.winner: str | None = None
        self.loser: str | None = None
        self._result = RoundResult()
        self._announced = False

    @property
    def round_active(self) -> bool:
        return self.phase == RoundPhase.ACTIVE

    @property
    def round_over(self) -> bool:
        return self.phase == RoundPhase.OVER

    @property
    def current_player(self) -> str | None:
        return None

    @property
    def winners(self) -> list[str]:
        return list(self._result.winners)

    @property
    def last_message(self) -> str:
        return self._result.message

    @property
    def roll_history(self) -> list[DuelRoll]:
        return list(self._rolls)

    def display_name(self, key: str | None) -> str | None:
        if key is None:
            return None
        return self._roster.get(key, key)

    def sync_roster(self, raw_names: Iterable[str]) -> None:
        self._roster = dict(canonical_roster(raw_names))
        if self.round_active:
            return
        if self.challenger not in self._roster:
            self.challenger = None
        if self.opponent not in self._roster:
            self.opponent = None

    def set_challenger(self, name: str | None) -> bool:
        if not self._can_pick(name):
            return False
        self.challenger = resolve(name)[0] if name else None
        return True

    def set_opponent(self, name: str | None) -> bool:
        if not self._can_pick(name):
            return False
        self.opponent = resolve(name)[0] if name else None
        return True

    def start_round(self) -> bool:
        if self.round_active:
            return False
        if self.challenger is None or self.opponent is None or self.challenger == self.opponent:
            log.debug("[Deathroll] Need a challenger and a different opponent")
            return False

        self._rolls.clear()
        self.current_max = self.starting_max
        self.winner = None
        self.loser = None
        self._result = RoundResult()
        self._announced = False
        self.phase = RoundPhase.ACTIVE
        log.info(f"[Deathroll] Round started: {self.challenger} vs {self.opponent}, max {self.current_max}")
        return True

    def submit_roll(self, key: str, value: int, display_name: str | None = None) -> bool:
        if not self.round_active:
            return False
        if key not in (self.challenger, self.opponent):
            log.debug(f"[Deathroll] {key} is not in this duel")
            return False
        if any(r.key == key and r.value == value for r in self._rolls):
            return False
        if value < 1 or value > self.current_max:
            log.debug(f"[Deathroll] Invalid roll {value} by {key}, must be between 1 and {self.current_max}")
            return False

        display = display_name or self.display_name(key)
        self._rolls.append(DuelRoll(key=key, display_name=display, value=value))
        log.debug(f"[Deathroll] {key} rolled {value} (max was {self.current_max})")

        if value == 1:
            other = self.opponent if key == self.challenger else self.challenger
            self.loser = display
            self.winner = self.display_name(other)
            self._result = RoundResult(
                winners=[self.winner],
                message=f"[Deathroll] {self.winner} wins! {self.loser} rolled a 1.",
            )
            self.phase = RoundPhase.OVER
            self._announced = True
            self._announce(self._result.message)
            log.info(self._result.message)
            return True

        self.current_max = value
        return True

    def stand(self, key: str) -> bool:
        return False

    def end_round(self) -> bool:
        if self.phase == RoundPhase.IDLE:
            return False

        if self.winner is None:
            self._result = RoundResult(message="[Deathroll] Round ended with no winner.")
        if not self._announced:
            self._announced = True
            self._announce(self._result.message)

        self.phase = RoundPhase.IDLE
        log.info(f"[Deathroll] Round ended: {self._result.message}")
        return True

    def snapshot(self) -> DeathrollSnapshot:
        return DeathrollSnapshot(
            phase=self.phase,
            challenger=self.display_name(self.challenger),
            opponent=self.display_name(self.opponent),
            ceiling=self.current_max,
            rolls=[(r.display_name, r.value) for r in self._rolls],
            winner=self.winner,
            loser=self.loser,
            winners=self.winners,
            message=self.last_message,
        )

    def _can_pick(self, name: str | None) -> bool:
        if self.round_active:
            return False
        if not name:
            return True
        if resolve(name)[0] not in self._roster:
            log.debug(f"[Deathroll] '{name}' is not in the party")
            return False
        return True
