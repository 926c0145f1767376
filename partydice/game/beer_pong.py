import random
from typing import Iterable

from ..models.game import CupPlayer, CupTeam, RoundPhase, RoundResult
from ..models.schemas import BeerPongSnapshot, CupPlayerView, CupTeamView
from .base import Announce, canonical_roster, quiet_announce
from .identity import resolve

import logging

log = logging.getLogger(__name__)

# hit threshold by drinks already consumed, last entry applies from then on
DRUNK_TARGETS = (65, 70, 75, 80, 85, 90)


def target_for(drinks: int) -> int:
    return DRUNK_TARGETS[min(drinks, len(DRUNK_TARGETS) - 1)]


class BeerPongGame:
    name = "Beer Pong"
    min_roll = 1
    max_roll = 100

    def __init__(
        self,
        announce: Announce | None = None,
        rng: random.Random | None = None,
        solo_cups: int = 10,
        team_cups: int = 5,
    ):
        self._announce = announce or quiet_announce
        self._rng = rng or random.Random()
        self.solo_cups = solo_cups
        self.team_cups = team_cups

        self.phase = RoundPhase.IDLE
        self.team_mode = False
        self._players: dict[str, CupPlayer] = {}
        self._teams: dict[str, CupTeam] = {}
        self._roll_history: set[tuple[str, int]] = set()

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
    def players(self) -> dict[str, CupPlayer]:
        return dict(self._players)

    @property
    def teams(self) -> dict[str, CupTeam]:
        return dict(self._teams)

    def sync_roster(self, raw_names: Iterable[str]) -> None:
        roster = dict(canonical_roster(raw_names))

        for key in list(self._players):
            if key not in roster:
                player = self._players.pop(key)
                if self.round_active and player.team in self._teams:
                    self._forfeit_cups(self._teams[player.team], player)
                self._leave_team(player)
                log.debug(f"[Beer Pong] {key} left the party")

        for key, display in roster.items():
            player = self._players.get(key)
            if player is None:
                self._players[key] = CupPlayer(
                    key=key, display_name=display, cups_left=self._starting_cups()
                )
            else:
                player.display_name = display

        if self.round_active:
            self._check_finished()

    def set_team_mode(self, enabled: bool) -> bool:
        if self.round_active or self.team_mode == enabled:
            return False

        self.team_mode = enabled
        self.clear_teams()
        for player in self._players.values():
            player.is_out = False
            player.drinks = 0
            player.cups_left = self._starting_cups()
        return True

    def assign_team(self, name: str, team_name: str) -> bool:
        if self.round_active or not self.team_mode:
            return False
        if not team_name or not team_name.strip():
            return False

        key, _ = resolve(name)
        player = self._players.get(key)
        if player is None:
            return False

        team_name = team_name.strip()
        self._leave_team(player)
        team = self._teams.setdefault(team_name, CupTeam(name=team_name))
        team.members.append(key)
        player.team = team_name
        log.debug(f"[Beer Pong] {key} joins team {team_name}")
        return True

    def clear_teams(self) -> bool:
        if self.round_active:
            return False
        self._teams.clear()
        for player in self._players.values():
            player.team = None
        return True

    def start_round(self) -> bool:
        if self.round_active:
            return False

        if self.team_mode:
            sides = [t for t in self._teams.values() if t.members]
        else:
            sides = list(self._players.values())
        if len(sides) < 2:
            log.debug("[Beer Pong] Round not started, need two sides")
            return False

        for player in self._players.values():
            player.drinks = 0
            player.is_out = False
            player.cups_left = self._starting_cups()
        for team in self._teams.values():
            team.cups_left = len(team.members) * self.team_cups
            team.is_out = False

        self._roll_history.clear()
        self._result = RoundResult()
        self._announced = False
        self.phase = RoundPhase.ACTIVE
        log.info("[Beer Pong] Round started")
        return True

    def submit_roll(self, key: str, value: int, display_name: str | None = None) -> bool:
        if not self.round_active:
            return False
        if value < self.min_roll or value > self.max_roll:
            return False

        shooter = self._players.get(key)
        if shooter is None or shooter.is_out:
            return False
        if (key, value) in self._roll_history:
            log.debug(f"[Beer Pong] Duplicate roll {value} from {key} ignored")
            return False
        if self.team_mode and shooter.team is None:
            log.debug(f"[Beer Pong] {key} is not assigned to any team")
            return False

        self._roll_history.add((key, value))
        if display_name:
            shooter.display_name = display_name

        target = target_for(shooter.drinks)
        if value >= target:
            log.debug(f"[Beer Pong] {key} hits with {value} (needed {target})")
            if self.team_mode:
                self._team_hit(shooter)
            else:
                self._solo_hit(shooter)
        else:
            log.debug(f"[Beer Pong] {key} misses with {value} (needed {target})")
            self._miss(shooter)

        self._check_finished()
        return True

    def stand(self, key: str) -> bool:
        return False

    def end_round(self) -> bool:
        if self.phase == RoundPhase.IDLE:
            return False

        if not self.round_over:
            self._result = self._resolve()
        if not self._announced:
            self._announced = True
            self._announce(self._result.message)

        self._roll_history.clear()
        self.phase = RoundPhase.IDLE
        log.info(f"[Beer Pong] Round ended: {self._result.message}")
        return True

    def snapshot(self) -> BeerPongSnapshot:
        return BeerPongSnapshot(
            phase=self.phase,
            team_mode=self.team_mode,
            players=[
                CupPlayerView(
                    key=p.key,
                    display_name=p.display_name,
                    cups_left=p.cups_left,
                    drinks=p.drinks,
                    target=target_for(p.drinks),
                    is_out=p.is_out,
                    team=p.team,
                )
                for p in self._players.values()
            ],
            teams=[
                CupTeamView(name=t.name, members=list(t.members), cups_left=t.cups_left, is_out=t.is_out)
                for t in self._teams.values()
            ],
            winners=self.winners,
            message=self.last_message,
        )

    def _solo_hit(self, shooter: CupPlayer) -> None:
        opponent = next(
            (p for p in self._players.values() if p.key != shooter.key and not p.is_out),
            None,
        )
        if opponent is None:
            return
        self._drink(opponent)
        log.debug(f"[Beer Pong] {opponent.display_name} drinks ({opponent.cups_left} cups left)")

    def _team_hit(self, shooter: CupPlayer) -> None:
        target_team = next(
            (t for t in self._teams.values() if t.name != shooter.team and not t.is_out and t.members),
            None,
        )
        if target_team is None:
            return

        target_team.cups_left -= 1
        candidates = [
            self._players[k]
            for k in target_team.members
            if not self._players[k].is_out and self._players[k].cups_left > 0
        ]
        if candidates:
            unlucky = self._rng.choice(candidates)
            self._drink(unlucky)
            log.debug(
                f"[Beer Pong] Team {target_team.name}'s {unlucky.display_name} drinks "
                f"({target_team.cups_left} team cups left, {unlucky.cups_left} player cups left)"
            )

        if target_team.cups_left <= 0:
            target_team.is_out = True
            log.debug(f"[Beer Pong] Team {target_team.name} is out")

    def _miss(self, shooter: CupPlayer) -> None:
        self._drink(shooter)
        if self.team_mode and shooter.team is not None:
            team = self._teams[shooter.team]
            team.cups_left -= 1
            if team.cups_left <= 0:
                team.is_out = True
                log.debug(f"[Beer Pong] Team {team.name} is out")

    def _forfeit_cups(self, team: CupTeam, player: CupPlayer) -> None:
        # the pool tracks the members' remaining cups, a leaver takes theirs along
        team.cups_left -= max(player.cups_left, 0)
        if team.cups_left <= 0 and not team.is_out:
            team.is_out = True
            log.debug(f"[Beer Pong] Team {team.name} is out")

    def _drink(self, player: CupPlayer) -> None:
        player.cups_left -= 1
        player.drinks += 1
        if player.cups_left <= 0:
            player.is_out = True
            log.debug(f"[Beer Pong] {player.display_name} is out")

    def _standing(self) -> list[str]:
        if self.team_mode:
            return [t.name for t in self._teams.values() if t.members and not t.is_out]
        return [p.display_name for p in self._players.values() if not p.is_out]

    def _check_finished(self) -> None:
        if len(self._standing()) > 1:
            return
        self._result = self._resolve()
        self.phase = RoundPhase.OVER
        self._announced = True
        self._announce(self._result.message)
        log.info(f"[Beer Pong] Round over: {self._result.message}")

    def _resolve(self) -> RoundResult:
        winners = self._standing()
        if not winners:
            return RoundResult(message="[Beer Pong] No winners this round.")
        return RoundResult(winners=winners, message=f"[Beer Pong] Winner(s): {', '.join(winners)}!")

    def _leave_team(self, player: CupPlayer) -> None:
        if player.team is None:
            return
        team = self._teams.get(player.team)
        if team is not None:
            team.members.remove(player.key)
            if not team.members:
                del self._teams[team.name]
        player.team = None

    def _starting_cups(self) -> int:
        return self.team_cups if self.team_mode else self.solo_cups
