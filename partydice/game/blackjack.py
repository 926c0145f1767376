from typing import Iterable

from ..models.game import BLACKJACK, PlayerHand, RoundPhase, RoundResult
from ..models.schemas import BlackjackHandView, BlackjackSnapshot
from .base import Announce, canonical_roster, quiet_announce
from .identity import resolve

import logging

log = logging.getLogger(__name__)


class BlackjackGame:
    """Dice blackjack: each roll is a card, the dealer (if any) plays last."""

    name = "Blackjack"
    min_card = 1
    max_card = 10

    def __init__(self, announce: Announce | None = None):
        self._announce = announce or quiet_announce

        self.phase = RoundPhase.IDLE
        self._roster: dict[str, str] = {}
        self._dealer: str | None = None
        self._hands: dict[str, PlayerHand] = {}
        self._turn_order: list[str] = []
        self._current_index = 0

        self._result = RoundResult()
        self._announced = False
        self.winning_score: int | None = None

    @property
    def round_active(self) -> bool:
        return self.phase == RoundPhase.ACTIVE

    @property
    def round_over(self) -> bool:
        return self.phase == RoundPhase.OVER

    @property
    def dealer(self) -> str | None:
        return self._dealer

    @property
    def turn_order(self) -> list[str]:
        return list(self._turn_order)

    @property
    def current_key(self) -> str | None:
        if not self._turn_order:
            return None
        return self._turn_order[self._current_index]

    @property
    def current_player(self) -> str | None:
        key = self.current_key
        return self.display_name(key) if key else None

    @property
    def winners(self) -> list[str]:
        return list(self._result.winners)

    @property
    def last_message(self) -> str:
        return self._result.message

    @property
    def hands(self) -> dict[str, PlayerHand]:
        return dict(self._hands)

    def display_name(self, key: str) -> str:
        if key in self._roster:
            return self._roster[key]
        if key in self._hands:
            return self._hands[key].display_name
        return key

    def sync_roster(self, raw_names: Iterable[str]) -> None:
        keep = self.current_key if self.round_active else None
        self._roster = dict(canonical_roster(raw_names))

        if self._dealer is not None and self._dealer not in self._roster:
            log.debug(f"Dealer {self._dealer} cleared, no longer in party")
            self._dealer = None

        for key, hand in self._hands.items():
            if key in self._roster:
                hand.set_display_name(self._roster[key])

        self._rebuild_turn_order(keep)

    def set_dealer(self, name: str | None) -> bool:
        if self.round_active:
            log.debug("Dealer cannot change during an active round")
            return False

        if name is None:
            self._dealer = None
            self._rebuild_turn_order()
            return True

        key, _ = resolve(name)
        if key not in self._roster:
            log.debug(f"Attempt to set invalid dealer '{name}'")
            return False

        self._dealer = key
        log.debug(f"Dealer set to {key}")
        self._rebuild_turn_order()
        return True

    def start_round(self) -> bool:
        if self.round_active:
            log.debug("Blackjack round already active")
            return False

        self._rebuild_turn_order()
        if not self._turn_order:
            log.debug("Blackjack round not started, party is empty")
            return False

        self._hands.clear()
        self._result = RoundResult()
        self._announced = False
        self.winning_score = None
        self._current_index = 0
        self.phase = RoundPhase.ACTIVE

        log.info(f"Blackjack round started with turn order: {', '.join(self._turn_order)}")
        return True

    def submit_roll(self, key: str, value: int, display_name: str | None = None) -> bool:
        if not self.round_active:
            return False
        if value < self.min_card or value > self.max_card:
            log.debug(f"Ignored invalid card {value} from {key}")
            return False
        if not key or key != self.current_key:
            log.debug(f"Ignored card from {key}, it is {self.current_key}'s turn")
            return False

        hand = self._hand_for(key, display_name)
        if hand.all_hands_finished():
            return False

        hand.add_card(value)
        score = hand.score()
        log.debug(f"{key} hand #{hand.current_hand_index + 1}: {hand.hands[hand.current_hand_index]} = {score}")

        if score > BLACKJACK:
            log.debug(f"{key}'s hand #{hand.current_hand_index + 1} busted")
            hand.stand()
            self._advance(hand)
        elif score == BLACKJACK:
            log.debug(f"{key}'s hand #{hand.current_hand_index + 1} hit 21")
            hand.stand()
            self._advance(hand)
        return True

    def stand(self, key: str, display_name: str | None = None) -> bool:
        if not self.round_active or not key or key != self.current_key:
            return False

        hand = self._hands.get(key)
        if hand is None:
            log.debug(f"{key} cannot stand before drawing a card")
            return False
        if display_name:
            hand.set_display_name(display_name)
        if hand.is_hand_done(hand.current_hand_index):
            return False

        hand.stand()
        log.debug(f"{key} stands on hand #{hand.current_hand_index + 1} with {hand.score()}")
        self._advance(hand)
        return True

    def split(self, key: str) -> bool:
        if not self.round_active or not key or key != self.current_key:
            return False

        hand = self._hands.get(key)
        if hand is None or not hand.split():
            log.debug(f"{key} cannot split right now")
            return False

        log.debug(f"{key} split their hand")
        return True

    def end_round(self) -> bool:
        if self.phase == RoundPhase.IDLE:
            return False

        self._result = self._resolve()
        if not self._announced:
            self._announced = True
            self._announce(self._result.message)

        self.phase = RoundPhase.IDLE
        self._current_index = 0
        log.info(f"Blackjack round ended: {self._result.message}")
        return True

    def snapshot(self) -> BlackjackSnapshot:
        return BlackjackSnapshot(
            phase=self.phase,
            dealer=self.display_name(self._dealer) if self._dealer else None,
            current_player=self.current_player if self.round_active else None,
            turn_order=[self.display_name(k) for k in self._turn_order],
            hands=[
                BlackjackHandView(
                    key=hand.key,
                    display_name=hand.display_name,
                    hands=[list(cards) for cards in hand.hands],
                    scores=[hand.score(i) for i in range(len(hand.hands))],
                    cards=[hand.card_display(i) for i in range(len(hand.hands))],
                    current_hand_index=hand.current_hand_index,
                    finished=hand.all_hands_finished(),
                )
                for hand in self._hands.values()
            ],
            winners=self.winners,
            winning_score=self.winning_score,
            message=self.last_message,
        )

    def _hand_for(self, key: str, display_name: str | None) -> PlayerHand:
        hand = self._hands.get(key)
        if hand is None:
            hand = PlayerHand(key=key, display_name=display_name or self.display_name(key))
            self._hands[key] = hand
        elif display_name:
            hand.set_display_name(display_name)
        return hand

    def _is_pending(self, key: str) -> bool:
        hand = self._hands.get(key)
        return hand is None or not hand.all_hands_finished()

    def _advance(self, hand: PlayerHand) -> None:
        if hand.advance():
            log.debug(f"{hand.key} moves to hand #{hand.current_hand_index + 1}")
            return
        log.debug(f"{hand.key} finished all hands")
        self._next_turn()

    def _next_turn(self) -> None:
        count = len(self._turn_order)
        for step in range(1, count + 1):
            index = (self._current_index + step) % count
            if self._is_pending(self._turn_order[index]):
                self._current_index = index
                log.debug(f"Next turn: {self._turn_order[index]}")
                return

        self.phase = RoundPhase.OVER
        log.info("Blackjack round over, all players done")

    def _rebuild_turn_order(self, keep: str | None = None) -> None:
        ordered = [key for key in self._roster if key != self._dealer]
        if self._dealer is not None:
            ordered.append(self._dealer)

        self._turn_order = ordered

        if keep is not None and keep in ordered:
            self._current_index = ordered.index(keep)
            return

        if self._current_index >= len(ordered):
            self._current_index = 0

        if self.round_active:
            if not ordered:
                self.phase = RoundPhase.OVER
            elif not self._is_pending(ordered[self._current_index]):
                self._next_turn()

    def _resolve(self) -> RoundResult:
        if not self._hands:
            self.winning_score = None
            return RoundResult(message="[Blackjack] Round ended. No players rolled.")

        if self._dealer is None:
            return self._resolve_highest()
        return self._resolve_against_dealer(self._dealer)

    def _resolve_highest(self) -> RoundResult:
        best_by_player = {}
        for key, hand in self._hands.items():
            scores = [hand.score(i) for i in range(len(hand.hands)) if hand.score(i) <= BLACKJACK]
            if scores:
                best_by_player[key] = max(scores)

        if not best_by_player:
            self.winning_score = None
            return RoundResult(message="[Blackjack] No winners this round.")

        best = max(best_by_player.values())
        winners = [self.display_name(k) for k, score in best_by_player.items() if score == best]
        self.winning_score = best
        log.debug(f"Winners: {', '.join(winners)} with score {best}")
        return RoundResult(
            winners=winners,
            message=f"[Blackjack] Winner(s): {', '.join(winners)} with {best}!",
        )

    def _resolve_against_dealer(self, dealer: str) -> RoundResult:
        dealer_hand = self._hands.get(dealer)
        dealer_scores = []
        if dealer_hand is not None:
            dealer_scores = [
                dealer_hand.score(i)
                for i in range(len(dealer_hand.hands))
                if dealer_hand.score(i) <= BLACKJACK
            ]
        dealer_score = max(dealer_scores, default=0)
        dealer_busted = dealer_score == 0
        log.debug(f"Dealer score: {dealer_score} (busted={dealer_busted})")

        # one entry per player, every winning sub-hand listed
        winning_hands: dict[str, list[tuple[int, int]]] = {}
        for key, hand in self._hands.items():
            if key == dealer:
                continue
            for i in range(len(hand.hands)):
                score = hand.score(i)
                if score > BLACKJACK:
                    continue
                if dealer_busted or score > dealer_score:
                    winning_hands.setdefault(key, []).append((i, score))
                    log.debug(f"{key} hand #{i + 1} wins with {score} against dealer {dealer_score}")

        if not winning_hands:
            self.winning_score = dealer_score
            return RoundResult(
                winners=[self.display_name(dealer)],
                message="[Blackjack] Dealer wins!",
            )

        self.winning_score = max(score for hands in winning_hands.values() for _, score in hands)

        parts = []
        for key, hands in winning_hands.items():
            scores = ", ".join(f"Hand {i + 1}: {score}" for i, score in hands)
            parts.append(f"{self.display_name(key)} ({scores})")

        return RoundResult(
            winners=[self.display_name(key) for key in winning_hands],
            message=f"[Blackjack] Winner(s): {', '.join(parts)} against dealer ({dealer_score})!",
        )
