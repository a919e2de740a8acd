"""Live table instances, one per session."""

import asyncio
import logging
from typing import Callable

from config import config
from core.game import BlackjackTable
from core.rules import TableRules

logger = logging.getLogger(__name__)


def loop_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """
    Run the reshuffle callback on the running event loop after ``delay``.

    Request handlers and the callback share one loop, so table mutations
    never overlap.
    """
    asyncio.get_running_loop().call_later(delay, callback)


def new_table() -> BlackjackTable:
    """Create a table from the application configuration."""
    return BlackjackTable(
        rules=TableRules.from_config(config.table),
        scheduler=loop_scheduler,
    )


class TableRegistry:
    """Map session IDs to their tables."""

    def __init__(self, factory: Callable[[], BlackjackTable] = new_table) -> None:
        self.factory = factory
        self._tables: dict[str, BlackjackTable] = {}

    def get(self, session_id: str) -> BlackjackTable | None:
        """Return the session's table, if any."""
        return self._tables.get(session_id)

    def get_or_create(self, session_id: str) -> BlackjackTable:
        """Get or create a table for the session."""
        if session_id not in self._tables:
            self._tables[session_id] = self.factory()
            logger.info("Opened table for session %s", session_id[:8])
        return self._tables[session_id]

    def replace(self, session_id: str) -> BlackjackTable:
        """Discard the session's table and open a fresh one."""
        self._tables[session_id] = self.factory()
        logger.info("Replaced table for session %s", session_id[:8])
        return self._tables[session_id]

    def discard(self, session_id: str) -> None:
        """Close the session's table."""
        self._tables.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._tables)


# Global table registry, shared by HTTP routes and the WebSocket
registry = TableRegistry()
