"""Shoe manager: owns the working shoe and its reshuffle policy."""

from random import Random
from typing import Iterator

from core.cards import Card, build_shoe, shuffle
from core.exceptions import ShoeExhausted


class Shoe:
    """A one-or-more deck shoe that is replaced wholesale when it runs low."""

    def __init__(
        self,
        num_decks: int = 1,
        reshuffle_threshold: float = 0.25,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize an empty shoe.

        No cards are loaded until the first ``shuffle()``, so a fresh shoe
        always reports ``needs_shuffle``.

        Args:
            num_decks: Number of decks in a full shoe
            reshuffle_threshold: Fraction of a full shoe below which it is replaced
            rng: Random number generator for shuffling
        """
        if num_decks < 1:
            raise ValueError("Shoe must have at least 1 deck")
        if not 0.0 < reshuffle_threshold < 1.0:
            raise ValueError("Reshuffle threshold must be between 0 and 1")

        self._num_decks = num_decks
        self._reshuffle_threshold = reshuffle_threshold
        self._rng = rng or Random()
        self._cards: list[Card] = []
        self._shuffle_count = 0

    def shuffle(self) -> None:
        """Replace the shoe with a freshly built and shuffled full shoe."""
        self._cards = shuffle(build_shoe(self._num_decks), self._rng)
        self._shuffle_count += 1

    def draw(self) -> Card:
        """Remove and return the card at the end of the shoe."""
        if not self._cards:
            raise ShoeExhausted()
        return self._cards.pop()

    def stack(self, cards: list[Card]) -> None:
        """
        Load the shoe with an exact card order.

        The last card in ``cards`` is drawn first. Used to replay a known deal.
        """
        self._cards = list(cards)

    @property
    def needs_shuffle(self) -> bool:
        """Check if the shoe is empty or below the reshuffle point."""
        return not self._cards or len(self._cards) < self.reshuffle_point

    @property
    def reshuffle_point(self) -> float:
        """Return the card count below which the shoe is replaced."""
        return self.total_cards * self._reshuffle_threshold

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the total number of cards in a full shoe."""
        return self._num_decks * 52

    @property
    def num_decks(self) -> int:
        """Return the number of decks in the shoe."""
        return self._num_decks

    @property
    def shuffle_count(self) -> int:
        """Return how many times the shoe has been replaced."""
        return self._shuffle_count

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
