"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class BetRequest(BaseModel):
    """Request to change the bet for the next round."""

    amount: int = Field(..., ge=1, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand"]


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    is_red: bool
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation. ``value`` is None while the hand is partly hidden."""

    cards: list[CardResponse]
    value: int | None


class RoundResultResponse(BaseModel):
    """Round result."""

    outcome: Literal["win", "loss", "push", "bust"]
    player_value: int
    dealer_value: int
    bet: int
    delta: int
    bankroll: int


class TableStateResponse(BaseModel):
    """Current table state."""

    state: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    dealer_revealed: bool
    dealer_showing: int | None
    bankroll: int
    bet: int
    shoe_remaining: int
    message: str
    message_text: str
    last_result: RoundResultResponse | None
    controls_enabled: bool
    can_hit: bool
    can_stand: bool
    can_start_round: bool
    is_bankrupt: bool


class ErrorResponse(BaseModel):
    """Engine failure surfaced to the client."""

    error: Literal["insufficient_funds", "invalid_action", "shuffling", "shoe_exhausted"]
    message: str


class SessionResponse(BaseModel):
    """Newly created table session."""

    session_id: str
