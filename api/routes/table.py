"""Table API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from api.presentation import snapshot_to_response
from api.schemas import ActionRequest, BetRequest, SessionResponse, TableStateResponse
from api.session import create_session, extract_session_id, get_session_store
from api.tables import registry
from core.game import BlackjackTable

router = APIRouter()


async def _close_expired_tables() -> None:
    for token in await get_session_store().expire():
        registry.discard(token)


async def _get_table(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> BlackjackTable:
    """Resolve the session header to its live table."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=401, detail="Invalid session token")

    await _close_expired_tables()
    if await get_session_store().touch(session_id) is None:
        registry.discard(session_id)
        raise HTTPException(status_code=404, detail="Session not found or expired")

    return registry.get_or_create(session_id)


TableDep = Annotated[BlackjackTable, Depends(_get_table)]


@router.post("/new")
async def open_table(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> SessionResponse:
    """Open a fresh table, creating a session unless a valid one is supplied."""
    store = get_session_store()
    known = (
        session_id is not None
        and extract_session_id(session_id) is not None
        and await store.get(session_id) is not None
    )
    if known:
        await store.open(session_id)
    else:
        session_id = await create_session()

    registry.replace(session_id)
    return SessionResponse(session_id=session_id)


@router.get("/state")
async def get_state(table: TableDep) -> TableStateResponse:
    """Get current table state."""
    return snapshot_to_response(table.snapshot())


@router.post("/deal")
async def deal(table: TableDep) -> TableStateResponse:
    """Start a round (reshuffling first if the shoe is low)."""
    return snapshot_to_response(table.start_round())


@router.post("/bet")
async def place_bet(request: BetRequest, table: TableDep) -> TableStateResponse:
    """Change the bet for the next round."""
    return snapshot_to_response(table.set_bet(request.amount))


@router.post("/action")
async def player_action(request: ActionRequest, table: TableDep) -> TableStateResponse:
    """Execute a player action."""
    actions = {
        "hit": table.hit,
        "stand": table.stand,
    }
    return snapshot_to_response(actions[request.action]())


@router.post("/reset")
async def reset_table(table: TableDep) -> TableStateResponse:
    """Restore the starting bankroll and bet."""
    return snapshot_to_response(table.reset())
