"""Blackjack table engine with state machine."""

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable

from transitions import Machine

from core.cards import Card, card_value
from core.exceptions import InsufficientFunds, InvalidActionForState, ShoeExhausted
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.pacing import Scheduler, immediate_scheduler
from core.game.state import GameState, MessageCategory
from core.hand import Hand, Outcome, evaluate_hands
from core.rules import TableRules
from core.shoe import Shoe

logger = logging.getLogger(__name__)

_OUTCOME_MESSAGES = {
    Outcome.WIN: MessageCategory.WIN,
    Outcome.LOSS: MessageCategory.LOSS,
    Outcome.PUSH: MessageCategory.PUSH,
    Outcome.BUST: MessageCategory.BUST,
}


@dataclass(frozen=True)
class RoundResult:
    """Settlement of a single round."""

    outcome: Outcome
    player_value: int
    dealer_value: int
    bet: int
    delta: int
    bankroll: int


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only view of the table for the presentation layer."""

    state: GameState
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    dealer_revealed: bool
    player_value: int
    dealer_value: int | None
    dealer_showing_value: int | None
    bankroll: int
    bet: int
    shoe_remaining: int
    message: MessageCategory
    last_result: RoundResult | None
    controls_enabled: bool
    can_hit: bool
    can_stand: bool
    can_start_round: bool
    is_bankrupt: bool


class BlackjackTable:
    """
    Single-player blackjack table using a state machine.

    This is the core game logic, completely UI-agnostic. All state is
    mutated through the command methods (``start_round``, ``hit``,
    ``stand``, ``set_bet``, ``reset``); observers read ``snapshot()`` or
    subscribe to events. Commands either complete fully or raise a
    ``TableError`` before touching any state.
    """

    # State machine states
    STATES = [s.name.lower() for s in GameState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_shuffle", "source": ["idle", "resolved"], "dest": "shuffling"},
        {
            "trigger": "deal",
            "source": ["idle", "resolved", "shuffling"],
            "dest": "awaiting_player_action",
        },
        {
            "trigger": "player_action",
            "source": "awaiting_player_action",
            "dest": "awaiting_player_action",
        },
        {"trigger": "settle", "source": "awaiting_player_action", "dest": "resolved"},
        {"trigger": "go_bankrupt", "source": "resolved", "dest": "bankrupt"},
        {
            "trigger": "restart",
            "source": ["idle", "awaiting_player_action", "resolved", "bankrupt"],
            "dest": "idle",
        },
    ]

    def __init__(
        self,
        rules: TableRules | None = None,
        rng: Random | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        """
        Initialize a new table.

        Args:
            rules: Table constants (uses defaults if not provided)
            rng: Random number generator for reproducible games
            scheduler: Runs the reshuffle callback after the pacing delay.
                Defaults to running it immediately.
        """
        self.rules = rules or TableRules()
        self._rng = rng or Random()
        self._scheduler = scheduler or immediate_scheduler
        self.shoe = Shoe(
            num_decks=self.rules.num_decks,
            reshuffle_threshold=self.rules.reshuffle_threshold,
            rng=self._rng,
        )

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.bankroll = self.rules.starting_bankroll
        self.bet = self.rules.default_bet
        self.message = MessageCategory.WELCOME
        self.last_result: RoundResult | None = None
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="idle",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> GameState:
        """Get current game state as enum."""
        return GameState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def unsubscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Unsubscribe from table events."""
        self.events.unsubscribe(handler, event_type)

    # Commands

    def start_round(self) -> TableSnapshot:
        """
        Start a new round.

        Clamps the bet to the bankroll, reshuffles first if the shoe is
        below its reshuffle point, then deals player, dealer, player, dealer.
        While the reshuffle is pending the table sits in SHUFFLING and the
        deal happens when the scheduler fires ``complete_shuffle``.

        Raises:
            InvalidActionForState: a round is in progress or a shuffle is pending
            InsufficientFunds: the table is bankrupt
        """
        if self.state not in (GameState.IDLE, GameState.RESOLVED, GameState.BANKRUPT):
            self._reject("start a round")

        if self.state == GameState.BANKRUPT or self.bankroll <= 0:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=self.bet,
                available=self.bankroll,
            )
            logger.debug("start_round refused: bankroll %s", self.bankroll)
            raise InsufficientFunds(self.bankroll, self.bet)

        if self.bet > self.bankroll:
            self._change_bet(self.bankroll, reason="clamped")

        self.player_hand.clear()
        self.dealer_hand.clear()
        self.last_result = None

        if self.shoe.needs_shuffle:
            delay = self._rng.uniform(
                self.rules.reshuffle_delay_min,
                self.rules.reshuffle_delay_max,
            )
            self.begin_shuffle()
            self.message = MessageCategory.SHUFFLING
            self.events.emit_new(
                EventType.SHUFFLE_STARTED,
                cards_remaining=self.shoe.cards_remaining,
                delay=delay,
            )
            logger.info(
                "Shuffling new shoe (%d cards left, %.1fs delay)",
                self.shoe.cards_remaining,
                delay,
            )
            self._scheduler(delay, self.complete_shuffle)
            return self.snapshot()

        self._deal_initial_cards()
        return self.snapshot()

    def complete_shuffle(self) -> TableSnapshot:
        """Install a fresh shoe and deal the pending round."""
        if self.state != GameState.SHUFFLING:
            self._reject("complete a shuffle")

        self.shoe.shuffle()
        self.events.emit_new(
            EventType.SHOE_SHUFFLED,
            cards_remaining=self.shoe.cards_remaining,
            emergency=False,
        )
        self._deal_initial_cards()
        return self.snapshot()

    def hit(self) -> TableSnapshot:
        """
        Player takes another card.

        Raises:
            InvalidActionForState: not the player's turn, or the hand is already 21
        """
        if self.state != GameState.AWAITING_PLAYER_ACTION:
            self._reject("hit")
        if self.player_hand.value == 21:
            self._reject("hit", "hand is already 21")

        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._reveal_dealer()
            self._resolve_round()
        else:
            self.player_action()

        return self.snapshot()

    def stand(self) -> TableSnapshot:
        """
        Player stands; the dealer plays out and the round is settled.

        Raises:
            InvalidActionForState: not the player's turn
        """
        if self.state != GameState.AWAITING_PLAYER_ACTION:
            self._reject("stand")

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self._reveal_dealer()
        self._play_dealer()
        self._resolve_round()
        return self.snapshot()

    def set_bet(self, amount: int) -> TableSnapshot:
        """
        Change the wager for the next round.

        The amount is clamped to the bankroll.

        Raises:
            ValueError: amount is not positive
            InvalidActionForState: a round is in progress or a shuffle is pending
            InsufficientFunds: the table is bankrupt
        """
        if amount < 1:
            raise ValueError("Bet must be positive")
        if self.state == GameState.BANKRUPT:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=amount,
                available=self.bankroll,
            )
            raise InsufficientFunds(self.bankroll, amount)
        if self.state not in (GameState.IDLE, GameState.RESOLVED):
            self._reject("change the bet")

        self._change_bet(min(amount, self.bankroll), reason="player")
        return self.snapshot()

    def reset(self) -> TableSnapshot:
        """
        Restore the starting bankroll and default bet.

        Clears a bankrupt table and abandons any round in progress. The shoe
        is left as it is.

        Raises:
            InvalidActionForState: a shuffle is pending
        """
        if self.state == GameState.SHUFFLING:
            self._reject("reset")

        self.bankroll = self.rules.starting_bankroll
        self.bet = self.rules.default_bet
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.last_result = None
        self.message = MessageCategory.WELCOME
        self.restart()

        self.events.emit_new(EventType.TABLE_RESET, bankroll=self.bankroll, bet=self.bet)
        logger.info("Table reset: bankroll %d, bet %d", self.bankroll, self.bet)
        return self.snapshot()

    # Queries

    @property
    def dealer_revealed(self) -> bool:
        """Check if the dealer's hole card is visible."""
        return self.state in (GameState.RESOLVED, GameState.BANKRUPT)

    @property
    def is_bankrupt(self) -> bool:
        """Check if the table is blocked until reset."""
        return self.state == GameState.BANKRUPT

    @property
    def controls_enabled(self) -> bool:
        """Check if gameplay commands are accepted at all."""
        return self.state != GameState.SHUFFLING

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return (
            self.state == GameState.AWAITING_PLAYER_ACTION
            and self.player_hand.value < 21
        )

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.state == GameState.AWAITING_PLAYER_ACTION

    @property
    def can_start_round(self) -> bool:
        """Check if a new round can be dealt."""
        return self.state in (GameState.IDLE, GameState.RESOLVED) and self.bankroll > 0

    def snapshot(self) -> TableSnapshot:
        """Return an immutable view of the table."""
        revealed = self.dealer_revealed
        dealer_showing = None
        if self.dealer_hand.cards:
            dealer_showing = card_value(self.dealer_hand.cards[0])

        return TableSnapshot(
            state=self.state,
            player_cards=tuple(self.player_hand.cards),
            dealer_cards=tuple(self.dealer_hand.cards),
            dealer_revealed=revealed,
            player_value=self.player_hand.value,
            dealer_value=self.dealer_hand.value if revealed else None,
            dealer_showing_value=dealer_showing,
            bankroll=self.bankroll,
            bet=self.bet,
            shoe_remaining=self.shoe.cards_remaining,
            message=self.message,
            last_result=self.last_result,
            controls_enabled=self.controls_enabled,
            can_hit=self.can_hit,
            can_stand=self.can_stand,
            can_start_round=self.can_start_round,
            is_bankrupt=self.is_bankrupt,
        )

    # Internals

    def _reject(self, action: str, reason: str | None = None) -> None:
        """Emit an INVALID_ACTION event and raise."""
        error = InvalidActionForState(action, self.state, reason)
        self.events.emit_new(
            EventType.INVALID_ACTION,
            message=str(error),
            state=self.state.name,
        )
        logger.debug("Rejected command: %s", error)
        raise error

    def _change_bet(self, amount: int, reason: str) -> None:
        if amount == self.bet:
            return
        previous = self.bet
        self.bet = amount
        self.events.emit_new(
            EventType.BET_CHANGED,
            previous=previous,
            bet=amount,
            reason=reason,
        )

    def _deal_initial_cards(self) -> None:
        """Deal the initial cards: player, dealer, player, dealer (face down)."""
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)

        self.deal()
        self.message = MessageCategory.YOUR_MOVE
        self.events.emit_new(
            EventType.ROUND_STARTED,
            bet=self.bet,
            player_value=self.player_hand.value,
            cards_remaining=self.shoe.cards_remaining,
        )

    def _draw(self) -> Card:
        """Draw a card, reshuffling on the spot if the shoe ran dry."""
        try:
            return self.shoe.draw()
        except ShoeExhausted:
            logger.warning("Shoe exhausted mid-round; reshuffling immediately")
            self.events.emit_new(EventType.SHOE_EXHAUSTED)
            self.shoe.shuffle()
            self.events.emit_new(
                EventType.SHOE_SHUFFLED,
                cards_remaining=self.shoe.cards_remaining,
                emergency=True,
            )
            return self.shoe.draw()

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self._draw()
        hand.add_card(card)
        is_dealer = hand is self.dealer_hand
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if is_dealer else "player",
            hand_value=hand.value if face_up and not is_dealer else None,
        )
        return card

    def _reveal_dealer(self) -> None:
        if len(self.dealer_hand.cards) >= 2:
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[1]),
                hand_value=self.dealer_hand.value,
            )

    def _play_dealer(self) -> None:
        """Dealer draws until reaching the stand threshold (soft totals included)."""
        while self.dealer_hand.value < self.rules.dealer_stands_on:
            self._deal_card_to_hand(self.dealer_hand)
            self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

        if self.dealer_hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

    def _resolve_round(self) -> None:
        """Settle the bet and apply the post-round bankroll rules."""
        outcome = evaluate_hands(self.player_hand, self.dealer_hand)
        bet = self.bet
        previous = self.bankroll

        if outcome == Outcome.WIN:
            self.bankroll += bet
        elif outcome in (Outcome.LOSS, Outcome.BUST):
            self.bankroll = max(0, self.bankroll - bet)

        result = RoundResult(
            outcome=outcome,
            player_value=self.player_hand.value,
            dealer_value=self.dealer_hand.value,
            bet=bet,
            delta=self.bankroll - previous,
            bankroll=self.bankroll,
        )
        self.last_result = result
        self.message = _OUTCOME_MESSAGES[outcome]

        if outcome == Outcome.WIN:
            self.events.emit_new(EventType.PLAYER_WINS, amount=result.delta)
        elif outcome == Outcome.PUSH:
            self.events.emit_new(EventType.PUSH)
        else:
            self.events.emit_new(EventType.PLAYER_LOSES, amount=-result.delta)

        self.settle()
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=outcome.value,
            result=result.delta,
            bankroll=self.bankroll,
        )
        logger.info(
            "Round %s: player %d vs dealer %d, bankroll %d -> %d",
            outcome,
            result.player_value,
            result.dealer_value,
            previous,
            self.bankroll,
        )

        if self.bankroll == 0:
            self.go_bankrupt()
            self.message = MessageCategory.BANKRUPT
            self.events.emit_new(EventType.BANKRUPT)
            logger.info("Bankroll exhausted; table blocked until reset")
        elif self.bankroll < self.bet:
            self._change_bet(self.bankroll, reason="clamped")
