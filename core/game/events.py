"""Table events and the emitter that delivers them."""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of table events."""

    # Round flow events
    ROUND_STARTED = auto()
    ROUND_ENDED = auto()

    # Betting events
    BET_CHANGED = auto()
    BANKRUPT = auto()
    TABLE_RESET = auto()

    # Card and shoe events
    CARD_DEALT = auto()
    SHUFFLE_STARTED = auto()
    SHOE_SHUFFLED = auto()
    SHOE_EXHAUSTED = auto()

    # Player action events
    PLAYER_HIT = auto()
    PLAYER_STAND = auto()

    # Dealer events
    DEALER_REVEALS = auto()
    DEALER_HITS = auto()
    DEALER_STANDS = auto()
    DEALER_BUSTS = auto()

    # Outcome events
    PLAYER_BUSTS = auto()
    PLAYER_WINS = auto()
    PLAYER_LOSES = auto()
    PUSH = auto()

    # Error events
    INVALID_ACTION = auto()
    INSUFFICIENT_FUNDS = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    Something that happened at the table.

    The engine never talks to a client directly; adapters subscribe to
    these and render them however they like.
    """

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.event_type.name}: {self.data}"


EventHandler = Callable[[GameEvent], None]


class EventEmitter:
    """
    Synchronous publish/subscribe hub for table events.

    Handlers registered for a specific type run before catch-all handlers.
    The most recent ``history_limit`` events are kept for inspection.
    """

    def __init__(self, history_limit: int = 500) -> None:
        self._handlers: dict[EventType | None, list[EventHandler]] = defaultdict(list)
        self._history: deque[GameEvent] = deque(maxlen=history_limit)

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """
        Register ``handler``.

        Args:
            handler: Called with each matching event
            event_type: Only deliver this type; None delivers everything
        """
        self._handlers[event_type].append(handler)

    def unsubscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GameEvent) -> None:
        """Record ``event`` and deliver it to its subscribers."""
        self._history.append(event)
        logger.debug("event %s", event)

        for key in (event.event_type, None):
            for handler in list(self._handlers.get(key, [])):
                handler(event)

    def emit_new(self, event_type: EventType, **data: Any) -> GameEvent:
        """Build an event from keyword data, emit it and return it."""
        event = GameEvent(event_type=event_type, data=data)
        self.emit(event)
        return event

    @property
    def history(self) -> list[GameEvent]:
        """Recent events, oldest first."""
        return list(self._history)
