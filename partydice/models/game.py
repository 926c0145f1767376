from enum import Enum

from pydantic import BaseModel, Field


BLACKJACK = 21


class RoundPhase(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    OVER = "over"


def best_score(cards: list[int]) -> int:
    total = sum(cards)
    aces = cards.count(1)
    while aces > 0 and total + 10 <= BLACKJACK:
        total += 10
        aces -= 1
    return total


class PlayerHand(BaseModel):
    key: str
    display_name: str
    hands: list[list[int]] = Field(default_factory=lambda: [[]])
    current_hand_index: int = 0
    finished: set[int] = Field(default_factory=set)

    def set_display_name(self, display_name: str) -> None:
        if display_name and display_name.strip():
            self.display_name = display_name

    def add_card(self, value: int) -> None:
        self.hands[self.current_hand_index].append(value)

    def score(self, hand_index: int | None = None) -> int:
        if hand_index is None:
            hand_index = self.current_hand_index
        return best_score(self.hands[hand_index])

    def stand(self) -> None:
        self.finished.add(self.current_hand_index)

    def is_hand_done(self, hand_index: int) -> bool:
        return hand_index in self.finished

    def all_hands_finished(self) -> bool:
        return all(i in self.finished for i in range(len(self.hands)))

    def can_split(self) -> bool:
        cards = self.hands[self.current_hand_index]
        return len(cards) == 2 and cards[0] == cards[1]

    def split(self) -> bool:
        if not self.can_split():
            return False
        cards = self.hands[self.current_hand_index]
        moved = cards.pop()
        self.hands.insert(self.current_hand_index + 1, [moved])
        # sub-hands after the insertion point shift one index up
        self.finished = {i + 1 if i > self.current_hand_index else i for i in self.finished}
        self.finished.discard(self.current_hand_index)
        return True

    def advance(self) -> bool:
        """Move to the next unfinished sub-hand; False when none is left."""
        for i in range(self.current_hand_index + 1, len(self.hands)):
            if i not in self.finished:
                self.current_hand_index = i
                return True
        return False

    def card_display(self, hand_index: int) -> str:
        if hand_index >= len(self.hands):
            return ""
        cards = self.hands[hand_index]
        hard = sum(cards)
        soft = best_score(cards)

        shown = []
        running = 0
        soft_aces = cards.count(1)
        for card in cards:
            if card == 1 and soft_aces > 0 and running + 11 <= BLACKJACK:
                shown.append("1/11")
                running += 11
                soft_aces -= 1
            else:
                shown.append(str(card))
                running += card

        total = f"{hard}/{soft}" if soft != hard else f"{hard}"
        return f"{' '.join(shown)} = {total}"


class DartsPlayer(BaseModel):
    key: str
    display_name: str
    scored: int = 0
    turns: list[int] = Field(default_factory=list)
    team: int | None = None


class DartsTeam(BaseModel):
    team_id: int
    name: str
    members: list[str] = Field(default_factory=list)


class CupPlayer(BaseModel):
    key: str
    display_name: str
    cups_left: int = 10
    drinks: int = 0
    is_out: bool = False
    team: str | None = None


class CupTeam(BaseModel):
    name: str
    members: list[str] = Field(default_factory=list)
    cups_left: int = 0
    is_out: bool = False


class DuelRoll(BaseModel):
    key: str
    display_name: str
    value: int


class RoundResult(BaseModel):
    winners: list[str] = Field(default_factory=list)
    message: str = ""
