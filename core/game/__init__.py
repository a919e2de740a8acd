"""Table engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GameState, MessageCategory
from core.game.engine import BlackjackTable, RoundResult, TableSnapshot

__all__ = [
    "GameEvent",
    "EventType",
    "GameState",
    "MessageCategory",
    "BlackjackTable",
    "RoundResult",
    "TableSnapshot",
]
