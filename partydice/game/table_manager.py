import json
import logging
import random

from broadcaster import Broadcast

from ..models.schemas import ChatLine, GameSummary
from .base import RoundStateMachine
from .beer_pong import BeerPongGame
from .blackjack import BlackjackGame
from .darts import DartsGame
from .deathroll import DeathrollGame
from .dispatch import (
    RollDispatcher,
    beer_pong_dispatcher,
    blackjack_dispatcher,
    darts_dispatcher,
    deathroll_dispatcher,
)
from .roster import RosterSynchronizer

log = logging.getLogger(__name__)


class TableManager:
    """One table per game: wires chat, roster and announcements together.

    Games announce synchronously into a queue; after each handled event the
    queue is published on the broadcast channel so every connected listener
    sees the result exactly once.
    """

    def __init__(
        self,
        broadcast: Broadcast,
        channel: str = "party_announce",
        rng: random.Random | None = None,
        darts_starting_score: int = 501,
        deathroll_starting_max: int = 1000,
        beer_pong_solo_cups: int = 10,
        beer_pong_team_cups: int = 5,
    ):
        self.broadcast = broadcast
        self.channel = channel
        self._pending: list[tuple[str, str]] = []

        self.blackjack = BlackjackGame(announce=self._queue("blackjack"))
        self.darts = DartsGame(announce=self._queue("darts"), starting_score=darts_starting_score)
        self.beer_pong = BeerPongGame(
            announce=self._queue("beer_pong"),
            rng=rng,
            solo_cups=beer_pong_solo_cups,
            team_cups=beer_pong_team_cups,
        )
        self.deathroll = DeathrollGame(
            announce=self._queue("deathroll"), starting_max=deathroll_starting_max
        )

        self.games: dict[str, RoundStateMachine] = {
            "blackjack": self.blackjack,
            "darts": self.darts,
            "beer_pong": self.beer_pong,
            "deathroll": self.deathroll,
        }
        self.dispatchers: list[RollDispatcher] = [
            blackjack_dispatcher(self.blackjack),
            darts_dispatcher(self.darts),
            beer_pong_dispatcher(self.beer_pong),
            deathroll_dispatcher(self.deathroll),
        ]
        self.roster = RosterSynchronizer(self.games.values())
        log.info(f"Table created with games: {', '.join(self.games)}")

    def get_game(self, game: str) -> RoundStateMachine | None:
        return self.games.get(game)

    def summaries(self) -> list[GameSummary]:
        return [
            GameSummary(
                game=slug,
                name=game.name,
                phase=game.phase,
                current_player=game.current_player,
            )
            for slug, game in self.games.items()
        ]

    async def handle_chat(self, line: ChatLine) -> bool:
        handled = False
        for dispatcher in self.dispatchers:
            if dispatcher.handle(line):
                handled = True
        await self.flush()
        return handled

    async def handle_roster(self, raw_names: list[str]) -> bool:
        changed = self.roster.refresh(raw_names)
        await self.flush()
        return changed

    async def start_round(self, game: str) -> bool:
        target = self.games.get(game)
        if target is None:
            return False
        started = target.start_round()
        if started:
            await self.publish({"type": "round_started", "game": game})
        return started

    async def end_round(self, game: str) -> bool:
        target = self.games.get(game)
        if target is None:
            return False
        ended = target.end_round()
        await self.flush()
        return ended

    async def control(self, game: str, action: str, **params) -> bool:
        """Run an auxiliary game command (dealer, teams, duelists...)."""
        target = self.games.get(game)
        handler = getattr(target, action, None) if target is not None else None
        if handler is None or action.startswith("_") or action not in CONTROL_ACTIONS.get(game, ()):
            log.debug(f"Unknown control '{action}' for {game}")
            return False
        done = handler(**params)
        await self.flush()
        return done

    async def flush(self) -> None:
        pending, self._pending = self._pending, []
        for game, message in pending:
            await self.publish({"type": "announce", "game": game, "message": message})

    async def publish(self, message: dict) -> None:
        await self.broadcast.publish(channel=self.channel, message=json.dumps(message))

    def _queue(self, game: str):
        def announce(message: str) -> None:
            log.info(f"[{game}] {message}")
            self._pending.append((game, message))

        return announce


CONTROL_ACTIONS = {
    "blackjack": ("set_dealer", "split"),
    "darts": ("set_team_mode", "assign_team", "rename_team", "reset_game"),
    "beer_pong": ("set_team_mode", "assign_team", "clear_teams"),
    "deathroll": ("set_challenger", "set_opponent"),
}
