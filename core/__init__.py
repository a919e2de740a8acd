"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Rank, Suit, build_shoe, card_value, shuffle
from core.exceptions import (
    InsufficientFunds,
    InvalidActionForState,
    ShoeExhausted,
    TableError,
)
from core.hand import Hand, Outcome, hand_value
from core.rules import TableRules
from core.shoe import Shoe

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "build_shoe",
    "card_value",
    "shuffle",
    "Hand",
    "Outcome",
    "hand_value",
    "Shoe",
    "TableRules",
    "TableError",
    "InsufficientFunds",
    "InvalidActionForState",
    "ShoeExhausted",
]
