"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from core.cards import Card, card_value


class Outcome(Enum):
    """Result of comparing the player's hand against the dealer's."""

    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BUST = "bust"

    def __str__(self) -> str:
        return self.value


def hand_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best blackjack total for a sequence of cards.

    Every ace starts at 11 and is downgraded to 1, one at a time, while the
    total is over 21. Returns the highest value that doesn't bust, or the
    lowest bust value.
    """
    total = 0
    aces = 0

    for card in cards:
        total += card_value(card)
        if card.is_ace:
            aces += 1

    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    @property
    def value(self) -> int:
        """Return the best hand value."""
        return hand_value(self.cards)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card_value(card) for card in self.cards)
        return total_hard + 10 <= 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


def evaluate_hands(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands.

    A player bust loses regardless of the dealer's total.
    """
    player_value = player_hand.value
    dealer_value = dealer_hand.value

    if player_value > 21:
        return Outcome.BUST
    if dealer_value > 21 or player_value > dealer_value:
        return Outcome.WIN
    if player_value == dealer_value:
        return Outcome.PUSH
    return Outcome.LOSS
