"""Exceptions raised by the blackjack table engine."""


class TableError(RuntimeError):
    """Base class for table engine exceptions."""


class InsufficientFunds(TableError):
    """Raised when the bankroll cannot cover a round."""

    def __init__(self, bankroll: int, bet: int) -> None:
        super().__init__(f"Bankroll ${bankroll} cannot cover a ${bet} bet")
        self.bankroll = bankroll
        self.bet = bet


class ShoeExhausted(TableError):
    """Raised when a card is drawn from an empty shoe."""

    def __init__(self) -> None:
        super().__init__("Cannot draw from empty shoe")


class InvalidActionForState(TableError):
    """Raised when a command is not allowed in the current game state."""

    def __init__(self, action: str, state: object, reason: str | None = None) -> None:
        message = f"Cannot {action} while {state}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.action = action
        self.state = state
        self.reason = reason
