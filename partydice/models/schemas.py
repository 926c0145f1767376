from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from .game import RoundPhase


class ChannelKind(str, Enum):
    PARTY = "party"
    SAY = "say"
    YELL = "yell"
    SHOUT = "shout"
    TELL = "tell"
    SYSTEM = "system"


class ChatLine(BaseModel):
    channel: ChannelKind
    sender: str
    message: str


class BlackjackHandView(BaseModel):
    key: str
    display_name: str
    hands: list[list[int]]
    scores: list[int]
    # "1/11 9 = 10/20" per sub-hand
    cards: list[str]
    current_hand_index: int
    finished: bool


class BlackjackSnapshot(BaseModel):
    game: Literal["blackjack"] = "blackjack"
    phase: RoundPhase
    dealer: str | None
    current_player: str | None
    turn_order: list[str]
    hands: list[BlackjackHandView]
    winners: list[str]
    winning_score: int | None
    message: str


class DartsPlayerView(BaseModel):
    key: str
    display_name: str
    remaining: int
    turns: list[int]
    team: int | None


class DartsTeamView(BaseModel):
    team_id: int
    name: str
    members: list[str]
    remaining: int


class DartsSnapshot(BaseModel):
    game: Literal["darts"] = "darts"
    phase: RoundPhase
    team_mode: bool
    current_player: str | None
    current_throws: list[int]
    players: list[DartsPlayerView]
    teams: list[DartsTeamView]
    winners: list[str]
    message: str


class CupPlayerView(BaseModel):
    key: str
    display_name: str
    cups_left: int
    drinks: int
    target: int
    is_out: bool
    team: str | None


class CupTeamView(BaseModel):
    name: str
    members: list[str]
    cups_left: int
    is_out: bool


class BeerPongSnapshot(BaseModel):
    game: Literal["beer_pong"] = "beer_pong"
    phase: RoundPhase
    team_mode: bool
    players: list[CupPlayerView]
    teams: list[CupTeamView]
    winners: list[str]
    message: str


class DeathrollSnapshot(BaseModel):
    game: Literal["deathroll"] = "deathroll"
    phase: RoundPhase
    challenger: str | None
    opponent: str | None
    ceiling: int
    rolls: list[tuple[str, int]]
    winner: str | None
    loser: str | None
    winners: list[str]
    message: str


class GameSummary(BaseModel):
    game: str
    name: str
    phase: RoundPhase
    current_player: str | None = None


class TableMessage(BaseModel):
    """Frame pushed by the host over the table WebSocket."""

    type: str
    game: str | None = None
    channel: ChannelKind | None = None
    sender: str = ""
    message: str = ""
    players: list[str] = Field(default_factory=list)
    player: str | None = None
    team: str | None = None
    team_id: int | None = None
    name: str | None = None
    enabled: bool | None = None
