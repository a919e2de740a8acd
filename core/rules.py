"""Table constants fixed at construction time."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TableRules:
    """
    Blackjack table configuration.

    None of these values can change while a table is running.
    """

    # Shoe configuration (1 deck for the simple table, 6 for the extended one)
    num_decks: int = 1
    reshuffle_threshold: float = 0.25

    # Money
    starting_bankroll: int = 100
    default_bet: int = 10

    # Dealer stands on this total or higher, soft totals included
    dealer_stands_on: int = 17

    # Pacing delay (seconds) while a new shoe is shuffled
    reshuffle_delay_min: float = 3.0
    reshuffle_delay_max: float = 5.0

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1:
            raise ValueError("num_decks must be at least 1")
        if not 0.0 < self.reshuffle_threshold < 1.0:
            raise ValueError("reshuffle_threshold must be between 0 and 1")
        if self.starting_bankroll < 1:
            raise ValueError("starting_bankroll must be positive")
        if not 0 < self.default_bet <= self.starting_bankroll:
            raise ValueError("default_bet must be positive and within the starting bankroll")
        if not 2 <= self.dealer_stands_on <= 21:
            raise ValueError("dealer_stands_on must be between 2 and 21")
        if self.reshuffle_delay_min < 0 or self.reshuffle_delay_max < self.reshuffle_delay_min:
            raise ValueError("reshuffle delay range is invalid")

    @classmethod
    def extended(cls) -> "TableRules":
        """Six-deck table."""
        return cls(num_decks=6)

    @classmethod
    def from_config(cls, table_config: Any) -> "TableRules":
        """Build rules from a ``config.TableConfig``."""
        return cls(
            num_decks=table_config.num_decks,
            reshuffle_threshold=table_config.reshuffle_threshold,
            starting_bankroll=table_config.starting_bankroll,
            default_bet=table_config.default_bet,
            dealer_stands_on=table_config.dealer_stands_on,
            reshuffle_delay_min=table_config.reshuffle_delay_min,
            reshuffle_delay_max=table_config.reshuffle_delay_max,
        )

    @property
    def reshuffle_point(self) -> float:
        """Return the remaining-card count below which the shoe is replaced."""
        return self.num_decks * 52 * self.reshuffle_threshold
