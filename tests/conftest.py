"""Pytest fixtures for blackjack table tests."""

import pytest
from random import Random
from typing import Callable

from hypothesis import strategies as st

from core.cards import Card, Rank, Suit, build_shoe
from core.hand import Hand
from core.rules import TableRules
from core.game import BlackjackTable


class ManualScheduler:
    """Holds the reshuffle callback until the test fast-forwards it."""

    def __init__(self) -> None:
        self.pending: list[tuple[float, Callable[[], None]]] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> None:
        self.pending.append((delay, callback))

    def run_pending(self) -> None:
        """Fire every scheduled callback, as if the delay elapsed."""
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def cards(*codes: str) -> list[Card]:
    """Build a card list from short strings like 'KS', '9H'."""
    return [Card.from_string(code) for code in codes]


def stack_shoe(table: BlackjackTable, draw_order: list[Card], filler: int = 20) -> None:
    """
    Stack the table's shoe so cards come out in ``draw_order``.

    ``filler`` extra cards sit at the bottom of the shoe so it stays above
    the reshuffle point.
    """
    bottom = build_shoe(table.rules.num_decks)[:filler]
    table.shoe.stack(bottom + list(reversed(draw_order)))


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def rules():
    """Default single-deck rules."""
    return TableRules()


@pytest.fixture
def scheduler():
    """A scheduler the test fires by hand."""
    return ManualScheduler()


@pytest.fixture
def table(rng):
    """A table that skips the reshuffle delay."""
    return BlackjackTable(rng=rng)


@pytest.fixture
def paced_table(rng, scheduler):
    """A table whose reshuffle waits for the manual scheduler."""
    return BlackjackTable(rng=rng, scheduler=scheduler)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.KING, Suit.HEARTS)])


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=[Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)])


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=[Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS)])


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(
        cards=[
            Card(Rank.TEN, Suit.SPADES),
            Card(Rank.SIX, Suit.HEARTS),
            Card(Rank.KING, Suit.CLUBS),
        ]
    )


# Hypothesis strategies for property-based testing
card_strategy = st.builds(Card, st.sampled_from(list(Rank)), st.sampled_from(list(Suit)))


def hand_cards_strategy(min_cards: int = 2, max_cards: int = 6):
    """Generate a list of cards for a hand."""
    return st.lists(card_strategy, min_size=min_cards, max_size=max_cards)
