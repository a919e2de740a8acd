"""Tests for cards, shoe construction and shuffling."""

import pytest
from collections import Counter
from random import Random

from hypothesis import given, strategies as st

from core.cards import Card, Rank, Suit, build_shoe, card_value, shuffle


class TestCard:
    """Tests for the Card class."""

    def test_card_creation(self):
        """Test creating a card."""
        card = Card(Rank.ACE, Suit.SPADES)
        assert card.rank == Rank.ACE
        assert card.suit == Suit.SPADES

    def test_card_immutability(self):
        """Test that cards are immutable."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_from_string(self):
        """Test creating cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("2H") == Card(Rank.TWO, Suit.HEARTS)
        assert Card.from_string("10D") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("TD") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("kc") == Card(Rank.KING, Suit.CLUBS)

    def test_card_from_string_with_symbols(self):
        """Test creating cards from strings with suit symbols."""
        assert Card.from_string("A♠") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("K♥") == Card(Rank.KING, Suit.HEARTS)

    @pytest.mark.parametrize("text", ["", "A", "1S", "AX", "11H"])
    def test_card_from_string_invalid(self, text):
        """Test that garbage strings are rejected."""
        with pytest.raises(ValueError):
            Card.from_string(text)

    def test_card_str(self):
        """Test string representation."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"
        assert str(Card(Rank.QUEEN, Suit.DIAMONDS)) == "Q♦"

    def test_red_suits(self):
        """Test red/black detection used for rendering."""
        assert Card(Rank.QUEEN, Suit.HEARTS).is_red
        assert Card(Rank.SEVEN, Suit.DIAMONDS).is_red
        assert not Card(Rank.ACE, Suit.SPADES).is_red
        assert not Card(Rank.KING, Suit.CLUBS).is_red

    def test_card_equality_and_hash(self):
        """Duplicates from different decks are indistinguishable."""
        card1 = Card(Rank.ACE, Suit.SPADES)
        card2 = Card(Rank.ACE, Suit.SPADES)
        assert card1 == card2
        assert len({card1, card2}) == 1
        assert card1 != Card(Rank.KING, Suit.SPADES)


class TestCardValue:
    """Tests for card_value."""

    @pytest.mark.parametrize("suit", list(Suit))
    def test_face_cards_are_ten(self, suit):
        """J, Q, K count 10 in every suit."""
        for rank in (Rank.JACK, Rank.QUEEN, Rank.KING):
            assert card_value(Card(rank, suit)) == 10

    @pytest.mark.parametrize("suit", list(Suit))
    def test_ace_is_eleven(self, suit):
        """Aces start at their soft value."""
        assert card_value(Card(Rank.ACE, suit)) == 11

    def test_numeric_ranks(self):
        """Numeric ranks count their face value."""
        numeric = [r for r in Rank if 2 <= r.value <= 10]
        for rank in numeric:
            assert card_value(Card(rank, Suit.CLUBS)) == rank.value

    def test_matches_card_property(self):
        """card_value and Card.value agree."""
        for card in build_shoe(1):
            assert card_value(card) == card.value


class TestBuildShoe:
    """Tests for build_shoe."""

    @pytest.mark.parametrize("decks", [1, 2, 6, 8])
    def test_composition(self, decks):
        """Every rank appears 4*D times and every suit 13*D times."""
        shoe = build_shoe(decks)
        assert len(shoe) == 52 * decks

        ranks = Counter(card.rank for card in shoe)
        suits = Counter(card.suit for card in shoe)
        assert all(ranks[rank] == 4 * decks for rank in Rank)
        assert all(suits[suit] == 13 * decks for suit in Suit)

    def test_generation_order(self):
        """Cards come out suit-major, rank-minor, starting A♠ and ending K♣."""
        shoe = build_shoe(1)
        assert shoe[0] == Card(Rank.ACE, Suit.SPADES)
        assert shoe[1] == Card(Rank.TWO, Suit.SPADES)
        assert shoe[12] == Card(Rank.KING, Suit.SPADES)
        assert shoe[13] == Card(Rank.ACE, Suit.HEARTS)
        assert shoe[-1] == Card(Rank.KING, Suit.CLUBS)

    def test_decks_repeat(self):
        """Each extra deck repeats the same order."""
        shoe = build_shoe(2)
        assert shoe[:52] == shoe[52:]

    def test_deterministic(self):
        """Building is not random."""
        assert build_shoe(3) == build_shoe(3)

    def test_invalid_deck_count(self):
        """A shoe needs at least one deck."""
        with pytest.raises(ValueError):
            build_shoe(0)


class TestShuffle:
    """Tests for the Fisher-Yates shuffle."""

    def test_shuffle_in_place(self):
        """The same list object comes back, reordered."""
        cards = build_shoe(1)
        result = shuffle(cards, Random(42))
        assert result is cards
        assert cards != build_shoe(1)

    def test_seeded_shuffle_is_reproducible(self):
        """Equal seeds give equal orders."""
        assert shuffle(build_shoe(1), Random(7)) == shuffle(build_shoe(1), Random(7))

    def test_short_sequences(self):
        """Empty and single-card lists are left alone."""
        assert shuffle([], Random(1)) == []
        one = [Card(Rank.ACE, Suit.SPADES)]
        assert shuffle(one, Random(1)) == [Card(Rank.ACE, Suit.SPADES)]

    @given(decks=st.integers(min_value=1, max_value=4), seed=st.integers())
    def test_preserves_multiset(self, decks, seed):
        """No cards added, removed or duplicated."""
        original = build_shoe(decks)
        shuffled = shuffle(list(original), Random(seed))
        assert Counter(shuffled) == Counter(original)

    def test_every_ordering_reachable(self):
        """All 6 orderings of three cards show up with roughly equal frequency."""
        rng = Random(1234)
        base = [Card(Rank.ACE, Suit.SPADES), Card(Rank.TWO, Suit.SPADES), Card(Rank.THREE, Suit.SPADES)]
        counts = Counter(tuple(shuffle(list(base), rng)) for _ in range(6000))

        assert len(counts) == 6
        for count in counts.values():
            assert 800 < count < 1200
