from typing import Callable, Iterable, Protocol, runtime_checkable

from pydantic import BaseModel

from ..models.game import RoundPhase
from .identity import resolve

import logging

log = logging.getLogger(__name__)

Announce = Callable[[str], None]


@runtime_checkable
class RoundStateMachine(Protocol):
    """Lifecycle shared by every party game: IDLE -> ACTIVE -> OVER -> IDLE.

    Operations return True when they changed state and False when they were
    ignored; none of them raises for inputs inside their domain.
    """

    name: str
    phase: RoundPhase

    @property
    def round_active(self) -> bool: ...

    @property
    def round_over(self) -> bool: ...

    @property
    def current_player(self) -> str | None: ...

    @property
    def winners(self) -> list[str]: ...

    @property
    def last_message(self) -> str: ...

    def sync_roster(self, raw_names: Iterable[str]) -> None: ...

    def start_round(self) -> bool: ...

    def submit_roll(self, key: str, value: int, display_name: str | None = None) -> bool: ...

    def stand(self, key: str) -> bool: ...

    def end_round(self) -> bool: ...

    def snapshot(self) -> BaseModel: ...


def canonical_roster(raw_names: Iterable[str]) -> list[tuple[str, str]]:
    """Resolve a roster snapshot, dropping blanks and repeated identities.

    Order follows the first appearance of each key; the last display form seen
    for a key wins.
    """
    roster: dict[str, str] = {}
    for raw in raw_names:
        key, display = resolve(raw)
        if not key:
            continue
        roster[key] = display
    return list(roster.items())


def quiet_announce(message: str) -> None:
    log.info(f"Announcement with no listener: {message}")
