from .base import RoundStateMachine, canonical_roster
from .identity import resolve, normalize
from .blackjack import BlackjackGame
from .darts import DartsGame
from .beer_pong import BeerPongGame
from .deathroll import DeathrollGame
from .dispatch import (
    RollDispatcher,
    beer_pong_dispatcher,
    blackjack_dispatcher,
    darts_dispatcher,
    deathroll_dispatcher,
)
from .roster import RosterSynchronizer
from .table_manager import TableManager

__all__ = [
    "RoundStateMachine",
    "canonical_roster",
    "resolve",
    "normalize",
    "BlackjackGame",
    "DartsGame",
    "BeerPongGame",
    "DeathrollGame",
    "RollDispatcher",
    "blackjack_dispatcher",
    "darts_dispatcher",
    "beer_pong_dispatcher",
    "deathroll_dispatcher",
    "RosterSynchronizer",
    "TableManager",
]
