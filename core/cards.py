"""Card model, shoe construction and Fisher-Yates shuffle."""

from dataclasses import dataclass
from enum import Enum
from random import Random


class Suit(Enum):
    """Card suits, in shoe generation order."""

    SPADES = "♠"
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"

    def __str__(self) -> str:
        return self.value

    @property
    def is_red(self) -> bool:
        """Check if this suit is printed in red."""
        return self in (Suit.HEARTS, Suit.DIAMONDS)


class Rank(Enum):
    """Card ranks, in shoe generation order (Ace first)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if 2 <= self.value <= 10:
            return str(self.value)
        return {
            Rank.ACE: "A",
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
        }[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        if self.value <= 10:
            return self.value
        return 10  # Face cards

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_red(self) -> bool:
        """Check if this card has a red suit."""
        return self.suit.is_red

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {suit.value: suit for suit in Suit}
        suit_map.update({suit.name[0]: suit for suit in Suit})

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def card_value(card: Card) -> int:
    """Return the soft blackjack value of a single card."""
    return card.rank.blackjack_value


def build_shoe(deck_count: int) -> list[Card]:
    """
    Build an unshuffled shoe of ``deck_count`` standard decks.

    Cards are generated deck by deck, suit-major and rank-minor, so
    ``build_shoe(1)[0]`` is the Ace of spades and ``[-1]`` the King of clubs.
    """
    if deck_count < 1:
        raise ValueError("Shoe must have at least 1 deck")
    return [
        Card(rank, suit)
        for _ in range(deck_count)
        for suit in Suit
        for rank in Rank
    ]


def shuffle(cards: list[Card], rng: Random | None = None) -> list[Card]:
    """
    Shuffle ``cards`` in place with a Fisher-Yates walk.

    Walks from the last index down to 1, swapping each position with a
    uniformly chosen index at or below it.

    Returns:
        The same list, for chaining.
    """
    rng = rng or Random()
    for i in range(len(cards) - 1, 0, -1):
        j = rng.randrange(i + 1)
        cards[i], cards[j] = cards[j], cards[i]
    return cards
