"""Render engine snapshots and failures for clients."""

from core.cards import Card
from core.exceptions import InsufficientFunds, InvalidActionForState, ShoeExhausted, TableError
from core.game import GameState, MessageCategory, TableSnapshot
from api.schemas import (
    CardResponse,
    ErrorResponse,
    HandResponse,
    RoundResultResponse,
    TableStateResponse,
)

MESSAGE_TEXT: dict[MessageCategory, str] = {
    MessageCategory.WELCOME: "Press Deal to start.",
    MessageCategory.YOUR_MOVE: "Your move...",
    MessageCategory.SHUFFLING: "🔄 Shuffling new shoe...",
    MessageCategory.WIN: "You win!",
    MessageCategory.LOSS: "Dealer wins.",
    MessageCategory.PUSH: "Push (tie).",
    MessageCategory.BUST: "You bust! Dealer wins.",
    MessageCategory.BANKRUPT: "You're out of money! Reset to play again.",
}

HIDDEN_CARD = CardResponse(rank="?", suit="?", value=0, is_red=False, hidden=True)


def card_to_response(card: Card) -> CardResponse:
    """Convert a Card to CardResponse."""
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        is_red=card.is_red,
    )


def snapshot_to_response(snapshot: TableSnapshot) -> TableStateResponse:
    """
    Convert a table snapshot to a response.

    Until the round is resolved the dealer's hole card is replaced by a
    hidden placeholder and no dealer total is reported.
    """
    dealer_cards = []
    for i, card in enumerate(snapshot.dealer_cards):
        if i == 1 and not snapshot.dealer_revealed:
            dealer_cards.append(HIDDEN_CARD)
        else:
            dealer_cards.append(card_to_response(card))

    last_result = None
    if snapshot.last_result is not None:
        result = snapshot.last_result
        last_result = RoundResultResponse(
            outcome=result.outcome.value,
            player_value=result.player_value,
            dealer_value=result.dealer_value,
            bet=result.bet,
            delta=result.delta,
            bankroll=result.bankroll,
        )

    return TableStateResponse(
        state=snapshot.state.name,
        player_hand=HandResponse(
            cards=[card_to_response(c) for c in snapshot.player_cards],
            value=snapshot.player_value if snapshot.player_cards else None,
        ),
        dealer_hand=HandResponse(cards=dealer_cards, value=snapshot.dealer_value),
        dealer_revealed=snapshot.dealer_revealed,
        dealer_showing=snapshot.dealer_showing_value,
        bankroll=snapshot.bankroll,
        bet=snapshot.bet,
        shoe_remaining=snapshot.shoe_remaining,
        message=snapshot.message.value,
        message_text=MESSAGE_TEXT[snapshot.message],
        last_result=last_result,
        controls_enabled=snapshot.controls_enabled,
        can_hit=snapshot.can_hit,
        can_stand=snapshot.can_stand,
        can_start_round=snapshot.can_start_round,
        is_bankrupt=snapshot.is_bankrupt,
    )


def error_to_response(error: TableError) -> tuple[int, ErrorResponse]:
    """Map an engine failure to an HTTP status code and body."""
    if isinstance(error, InsufficientFunds):
        return 402, ErrorResponse(error="insufficient_funds", message=str(error))
    if isinstance(error, InvalidActionForState):
        if error.state == GameState.SHUFFLING:
            return 409, ErrorResponse(error="shuffling", message=str(error))
        return 400, ErrorResponse(error="invalid_action", message=str(error))
    if isinstance(error, ShoeExhausted):
        return 500, ErrorResponse(error="shoe_exhausted", message=str(error))
    return 400, ErrorResponse(error="invalid_action", message=str(error))
