from typing import Iterable

from ..models.game import DartsPlayer, DartsTeam, RoundPhase, RoundResult
from ..models.schemas import DartsPlayerView, DartsSnapshot, DartsTeamView
from .base import Announce, canonical_roster, quiet_announce
from .identity import resolve

import logging

log = logging.getLogger(__name__)

DEFAULT_TEAM_NAMES = ("Team A", "Team B")
DARTS_PER_TURN = 3


class DartsGame:
    """501 countdown. Rounds repeat until someone (or a team) hits exactly 0."""

    name = "Darts 501"
    min_dart = 1
    max_dart = 60

    def __init__(self, announce: Announce | None = None, starting_score: int = 501):
        self._announce = announce or quiet_announce
        self.starting_score = starting_score

        self.phase = RoundPhase.IDLE
        self.team_mode = False
        self._roster: dict[str, str] = {}
        self._players: dict[str, DartsPlayer] = {}
        self._teams = self._default_teams()
        self._round_backup: dict[str, int] = {}

        self._thrower: str | None = None
        self._throws: list[int] = []

        self._winner: str | None = None
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
        if self._thrower is None:
            return None
        return self._players[self._thrower].display_name

    @property
    def current_throws(self) -> list[int]:
        return list(self._throws)

    @property
    def winner(self) -> str | None:
        return self._winner

    @property
    def winners(self) -> list[str]:
        return list(self._result.winners)

    @property
    def last_message(self) -> str:
        return self._result.message

    @property
    def teams(self) -> list[DartsTeam]:
        return list(self._teams)

    def remaining(self, key: str) -> int | None:
        player = self._players.get(key)
        if player is None:
            return None
        return self.starting_score - player.scored

    def team_remaining(self, team_id: int) -> int | None:
        if team_id not in (0, 1):
            return None
        scored = sum(self._players[k].scored for k in self._teams[team_id].members)
        return self.starting_score - scored

    def scores(self) -> dict[str, int]:
        return {key: self.remaining(key) for key in self._players}

    def sync_roster(self, raw_names: Iterable[str]) -> None:
        self._roster = dict(canonical_roster(raw_names))

        for key, display in self._roster.items():
            player = self._players.get(key)
            if player is None:
                self._players[key] = DartsPlayer(key=key, display_name=display)
                log.debug(f"[Darts] {key} joined with {self.starting_score}")
            else:
                player.display_name = display

        if self._thrower is not None and self._thrower not in self._roster:
            log.debug(f"[Darts] {self._thrower} left mid-turn, dropping {self._throws}")
            self._clear_throws()

        if not self.round_active:
            self._prune_departed()

    def set_team_mode(self, enabled: bool) -> bool:
        if self.round_active:
            return False
        if self.team_mode == enabled:
            return False
        self.team_mode = enabled
        self.reset_game()
        return True

    def assign_team(self, name: str, team_id: int) -> bool:
        if self.round_active or not self.team_mode:
            return False
        if team_id not in (0, 1):
            return False

        key, _ = resolve(name)
        player = self._players.get(key)
        if player is None:
            return False

        if player.team is not None:
            self._teams[player.team].members.remove(key)
        player.team = team_id
        self._teams[team_id].members.append(key)
        log.debug(f"[Darts] {key} assigned to {self._teams[team_id].name}")
        return True

    def rename_team(self, team_id: int, new_name: str) -> bool:
        if team_id not in (0, 1) or not new_name or not new_name.strip():
            return False
        self._teams[team_id].name = new_name.strip()
        return True

    def reset_game(self) -> bool:
        if self.round_active:
            return False

        self._players = {
            key: DartsPlayer(key=key, display_name=display)
            for key, display in self._roster.items()
        }
        self._teams = self._default_teams()
        self._round_backup.clear()
        self._clear_throws()
        self._winner = None
        self._result = RoundResult()
        self.phase = RoundPhase.IDLE
        log.info("[Darts] Game reset")
        return True

    def start_round(self) -> bool:
        if self.round_active:
            return False
        if self._winner is not None:
            self.reset_game()
        if not self._players:
            log.debug("[Darts] Round not started, no players")
            return False

        self._round_backup = {key: p.scored for key, p in self._players.items()}
        for player in self._players.values():
            player.turns.clear()
        self._clear_throws()
        self._result = RoundResult()
        self._announced = False
        self.phase = RoundPhase.ACTIVE
        log.info("[Darts] Round started")
        return True

    def submit_roll(self, key: str, value: int, display_name: str | None = None) -> bool:
        if not self.round_active:
            return False
        if value < self.min_dart or value > self.max_dart:
            return False

        player = self._players.get(key)
        if player is None:
            log.debug(f"[Darts] {key} is not playing")
            return False
        if self.team_mode and player.team is None:
            log.debug(f"[Darts] {key} has no team")
            return False
        if self._thrower is not None and self._thrower != key:
            log.debug(f"[Darts] Starting turn for {key}, dropping {self._throws} from {self._thrower}")
            self._clear_throws()

        if display_name:
            player.display_name = display_name
        self._thrower = key
        self._throws.append(value)
        log.debug(f"[Darts] {key} threw dart: {value}")

        if len(self._throws) == DARTS_PER_TURN:
            throws = self._throws
            self._clear_throws()
            self.process_throws(key, throws)
        return True

    def process_throws(self, key: str, throws: list[int]) -> bool:
        """Apply one complete turn atomically; False if it was rejected."""
        if not self.round_active or len(throws) != DARTS_PER_TURN:
            return False
        player = self._players.get(key)
        if player is None or (self.team_mode and player.team is None):
            return False
        return self._apply_turn(player, throws)

    def stand(self, key: str) -> bool:
        return False

    def end_round(self) -> bool:
        if self.phase == RoundPhase.IDLE:
            return False

        self._clear_throws()
        if self._winner is None:
            self._result = RoundResult(message=self._standings_message())
        if not self._announced:
            self._announced = True
            self._announce(self._result.message)

        self.phase = RoundPhase.IDLE
        self._round_backup.clear()
        self._prune_departed()
        log.info(f"[Darts] Round ended: {self._result.message}")
        return True

    def snapshot(self) -> DartsSnapshot:
        return DartsSnapshot(
            phase=self.phase,
            team_mode=self.team_mode,
            current_player=self.current_player,
            current_throws=self.current_throws,
            players=[
                DartsPlayerView(
                    key=p.key,
                    display_name=p.display_name,
                    remaining=self.remaining(p.key),
                    turns=list(p.turns),
                    team=p.team,
                )
                for p in self._players.values()
            ],
            teams=[
                DartsTeamView(
                    team_id=t.team_id,
                    name=t.name,
                    members=list(t.members),
                    remaining=self.team_remaining(t.team_id),
                )
                for t in self._teams
            ] if self.team_mode else [],
            winners=self.winners,
            message=self.last_message,
        )

    def _apply_turn(self, player: DartsPlayer, throws: list[int]) -> bool:
        total = sum(throws)

        if self.team_mode:
            team = self._teams[player.team]
            left = self.team_remaining(team.team_id) - total
            if left < 0:
                for member in team.members:
                    self._players[member].scored = self._round_backup.get(member, 0)
                    self._players[member].turns.clear()
                log.debug(f"[Darts] {team.name} bust on {total}, back to {self.team_remaining(team.team_id)}")
                return False
        else:
            left = self.remaining(player.key) - total
            if left < 0:
                log.debug(f"[Darts] {player.key} turn total {total} would drop below 0. Score remains {self.remaining(player.key)}")
                return False

        player.scored += total
        player.turns.append(total)
        log.debug(f"[Darts] {player.key} full turn: {throws} = {total}, {left} left")

        if left == 0:
            self._finish(self._label_for(player.key))
        return True

    def _finish(self, winner: str) -> None:
        self._winner = winner
        self._result = RoundResult(winners=[winner], message=f"[Darts] {winner} wins!")
        self.phase = RoundPhase.OVER
        self._announced = True
        self._announce(self._result.message)
        log.info(f"[Darts] {winner} has won the game")

    def _label_for(self, key: str) -> str:
        player = self._players.get(key)
        if player is None:
            return key
        if self.team_mode and player.team is not None:
            return self._teams[player.team].name
        return player.display_name

    def _standings_message(self) -> str:
        if self.team_mode:
            standings = [f"{t.name} {self.team_remaining(t.team_id)}" for t in self._teams]
        else:
            standings = [f"{p.display_name} {self.remaining(p.key)}" for p in self._players.values()]
        return f"[Darts] Round over. {', '.join(standings)}"

    def _prune_departed(self) -> None:
        for key in list(self._players):
            if key in self._roster:
                continue
            player = self._players.pop(key)
            if player.team is not None:
                self._teams[player.team].members.remove(key)
            log.debug(f"[Darts] {key} left the party")

    def _clear_throws(self) -> None:
        self._thrower = None
        self._throws = []

    @staticmethod
    def _default_teams() -> list[DartsTeam]:
        return [DartsTeam(team_id=i, name=name) for i, name in enumerate(DEFAULT_TEAM_NAMES)]
