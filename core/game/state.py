"""Game state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Table state machine states.

    Flow: IDLE → [SHUFFLING →] AWAITING_PLAYER_ACTION → RESOLVED → ...
    RESOLVED → BANKRUPT when the bankroll hits zero; reset() returns to IDLE.
    """

    # No round dealt yet, or table was reset
    IDLE = auto()

    # New shoe being shuffled; every gameplay command is rejected
    SHUFFLING = auto()

    # Player may hit or stand
    AWAITING_PLAYER_ACTION = auto()

    # Round settled, dealer hand revealed
    RESOLVED = auto()

    # Bankroll exhausted; only reset() is accepted
    BANKRUPT = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class MessageCategory(Enum):
    """What the table is telling the player; wording is up to the presentation."""

    WELCOME = "welcome"
    YOUR_MOVE = "your_move"
    SHUFFLING = "shuffling"
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"
    BUST = "bust"
    BANKRUPT = "bankrupt"
