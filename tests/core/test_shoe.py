"""Tests for the Shoe manager."""

import pytest
from collections import Counter
from random import Random

from core.cards import Card, Rank, Suit, build_shoe
from core.exceptions import ShoeExhausted
from core.shoe import Shoe


class TestShoe:
    """Tests for the Shoe class."""

    def test_starts_empty(self):
        """No shoe exists until the first shuffle."""
        shoe = Shoe(num_decks=1)
        assert len(shoe) == 0
        assert shoe.needs_shuffle
        assert shoe.shuffle_count == 0

    @pytest.mark.parametrize("decks", [1, 6])
    def test_shuffle_fills_shoe(self, decks):
        """A shuffle installs a full shoe."""
        shoe = Shoe(num_decks=decks, rng=Random(42))
        shoe.shuffle()
        assert len(shoe) == 52 * decks
        assert Counter(shoe) == Counter(build_shoe(decks))
        assert shoe.shuffle_count == 1

    def test_reshuffle_point(self):
        """The threshold is a quarter of a full shoe by default."""
        assert Shoe(num_decks=1).reshuffle_point == 13
        assert Shoe(num_decks=6).reshuffle_point == 78

    def test_needs_shuffle_below_threshold(self):
        """12 cards left in a single-deck shoe is below the 13-card point."""
        shoe = Shoe(num_decks=1, rng=Random(42))
        shoe.shuffle()

        for _ in range(52 - 13):
            shoe.draw()
        assert shoe.cards_remaining == 13
        assert not shoe.needs_shuffle

        shoe.draw()
        assert shoe.cards_remaining == 12
        assert shoe.needs_shuffle

    def test_draw_from_end(self):
        """Cards are removed from the end of the sequence."""
        shoe = Shoe(num_decks=1)
        shoe.stack([Card(Rank.TWO, Suit.CLUBS), Card(Rank.KING, Suit.HEARTS)])
        assert shoe.draw() == Card(Rank.KING, Suit.HEARTS)
        assert shoe.draw() == Card(Rank.TWO, Suit.CLUBS)

    def test_draw_empty_raises(self):
        """Drawing from an empty shoe is an error, not a crash."""
        shoe = Shoe(num_decks=1)
        with pytest.raises(ShoeExhausted):
            shoe.draw()

    def test_shuffle_replaces_wholesale(self):
        """Remaining cards are discarded, not topped up."""
        shoe = Shoe(num_decks=1, rng=Random(3))
        shoe.stack([Card(Rank.ACE, Suit.SPADES)] * 5)
        shoe.shuffle()
        assert len(shoe) == 52
        assert Counter(shoe)[Card(Rank.ACE, Suit.SPADES)] == 1

    def test_invalid_decks_raises(self):
        """Test that invalid deck count raises error."""
        with pytest.raises(ValueError):
            Shoe(num_decks=0)

    @pytest.mark.parametrize("threshold", [0, 1, 1.5, -0.1])
    def test_invalid_threshold_raises(self, threshold):
        """Threshold must be a proper fraction."""
        with pytest.raises(ValueError):
            Shoe(num_decks=1, reshuffle_threshold=threshold)

    def test_total_cards(self):
        """Full-shoe size follows the deck count."""
        shoe = Shoe(num_decks=6)
        assert shoe.total_cards == 312
        assert shoe.num_decks == 6
