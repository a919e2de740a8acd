"""WebSocket connection management with table engine integration."""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.presentation import error_to_response, snapshot_to_response
from api.session import extract_session_id, get_session_store
from api.tables import registry
from core.exceptions import TableError
from core.game import BlackjackTable
from core.game.events import GameEvent

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """Manage WebSocket connections and their event queues."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}
        self._event_queues: dict[str, asyncio.Queue[GameEvent]] = {}

    async def connect(self, websocket: WebSocket, session_id: str) -> None:
        """Accept and register a new connection."""
        await websocket.accept()
        self._connections[session_id] = websocket
        self._event_queues[session_id] = asyncio.Queue()

    def disconnect(self, session_id: str) -> None:
        """Remove a connection. The table stays open for reconnection."""
        self._connections.pop(session_id, None)
        self._event_queues.pop(session_id, None)

    def queue_event(self, session_id: str, event: GameEvent) -> None:
        """Queue an event for async delivery."""
        queue = self._event_queues.get(session_id)
        if queue is not None:
            queue.put_nowait(event)

    async def next_event(self, session_id: str) -> GameEvent:
        """Wait for the next event for a session."""
        return await self._event_queues[session_id].get()

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        websocket = self._connections.get(session_id)
        if websocket is not None:
            await websocket.send_json(message)


# Global connection manager
manager = ConnectionManager()


def _state_message(table: BlackjackTable) -> dict[str, Any]:
    return {
        "type": "state_update",
        "state": snapshot_to_response(table.snapshot()).model_dump(mode="json"),
    }


def _event_message(event: GameEvent, table: BlackjackTable) -> dict[str, Any]:
    """Convert a table event to a WebSocket message."""
    return {
        "type": "event",
        "event_type": event.event_type.name,
        "data": event.data,
        "state": snapshot_to_response(table.snapshot()).model_dump(mode="json"),
    }


def _error_message(message: str, error: str = "invalid_request") -> dict[str, Any]:
    return {"type": "error", "error": error, "message": message}


@router.websocket("/table/{session_id}")
async def table_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    WebSocket endpoint for real-time table updates.

    Messages from client:
    - {"type": "deal"}
    - {"type": "action", "action": "hit"|"stand"}
    - {"type": "bet", "amount": 25}
    - {"type": "reset"}
    - {"type": "get_state"}

    Messages to client:
    - {"type": "state_update", "state": {...}}
    - {"type": "event", "event_type": "...", "data": {...}, "state": {...}}
    - {"type": "error", "error": "...", "message": "..."}
    """
    live = (
        extract_session_id(session_id) is not None
        and await get_session_store().touch(session_id) is not None
    )
    if not live:
        await websocket.close(code=1008)
        return

    await manager.connect(websocket, session_id)
    table = registry.get_or_create(session_id)

    def on_event(event: GameEvent) -> None:
        manager.queue_event(session_id, event)

    table.subscribe(on_event)
    await manager.send_message(session_id, _state_message(table))

    async def forward_events() -> None:
        """Send queued table events to the client."""
        while True:
            event = await manager.next_event(session_id)
            await manager.send_message(session_id, _event_message(event, table))

    event_task = asyncio.create_task(forward_events())

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                message = None
            if not isinstance(message, dict):
                await manager.send_message(session_id, _error_message("Malformed message"))
                continue

            # POST /api/table/new may have swapped the session's table
            current = registry.get_or_create(session_id)
            if current is not table:
                table.unsubscribe(on_event)
                table = current
                table.subscribe(on_event)

            msg_type = message.get("type")
            try:
                if msg_type == "get_state":
                    await manager.send_message(session_id, _state_message(table))

                elif msg_type == "deal":
                    table.start_round()

                elif msg_type == "action":
                    action = message.get("action")
                    if action == "hit":
                        table.hit()
                    elif action == "stand":
                        table.stand()
                    else:
                        await manager.send_message(
                            session_id, _error_message(f"Unknown action: {action}")
                        )

                elif msg_type == "bet":
                    amount = message.get("amount")
                    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
                        await manager.send_message(
                            session_id, _error_message("Bet must be a positive whole number")
                        )
                        continue
                    table.set_bet(amount)

                elif msg_type == "reset":
                    table.reset()

                else:
                    await manager.send_message(
                        session_id, _error_message(f"Unknown message type: {msg_type}")
                    )

            except TableError as exc:
                _, body = error_to_response(exc)
                await manager.send_message(session_id, _error_message(body.message, body.error))

    except WebSocketDisconnect:
        logger.debug("WebSocket closed for session %s", session_id[:8])
    finally:
        table.unsubscribe(on_event)
        event_task.cancel()
        try:
            await event_task
        except asyncio.CancelledError:
            pass
        manager.disconnect(session_id)
