from .game import (
    RoundPhase,
    PlayerHand,
    DartsPlayer,
    DartsTeam,
    CupPlayer,
    CupTeam,
    DuelRoll,
    RoundResult,
)
from .schemas import ChannelKind, ChatLine, TableMessage

__all__ = [
    "RoundPhase",
    "PlayerHand",
    "DartsPlayer",
    "DartsTeam",
    "CupPlayer",
    "CupTeam",
    "DuelRoll",
    "RoundResult",
    "ChannelKind",
    "ChatLine",
    "TableMessage",
]
