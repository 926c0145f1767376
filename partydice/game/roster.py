from typing import Iterable

from .base import RoundStateMachine, canonical_roster

import logging

log = logging.getLogger(__name__)


class RosterSynchronizer:
    """Pushes party roster changes into every registered game.

    The host may poll as often as it likes; games only see a snapshot when
    the resolved roster actually differs from the last one applied.
    """

    def __init__(self, games: Iterable[RoundStateMachine] = ()):
        self._games = list(games)
        self._last: list[tuple[str, str]] | None = None

    @property
    def members(self) -> list[tuple[str, str]]:
        return list(self._last or [])

    def register(self, game: RoundStateMachine) -> None:
        self._games.append(game)
        if self._last is not None:
            game.sync_roster([display for _, display in self._last])

    def refresh(self, raw_names: Iterable[str]) -> bool:
        names = [name.strip() for name in raw_names if name and name.strip()]
        roster = canonical_roster(names)
        if roster == self._last:
            return False

        self._last = roster
        log.info(f"Party roster changed: {', '.join(display for _, display in roster) or '(empty)'}")
        for game in self._games:
            game.sync_roster(names)
        return True
