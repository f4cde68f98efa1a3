"""
Reducer - Applies click actions to the board.

The reducer is the single point of state mutation.
All state changes must go through apply() / apply_click().

Design principles:
- Pure function: (board, action) -> new board
- Illegal moves are not errors: the input board comes back unchanged
- Malformed requests are reported as failures, never as no-ops
- Broken invariants propagate (they are engine bugs)
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .action import Action, ActionType, ActionResult
from .card import Card
from .errors import DecodeError, InvariantError
from .ids import DECK_MARKER_ID, FOUNDATION_COUNT, decode_tableau_id, parse_event
from .slot import EMPTY, Empty, Occupied, Slot
from .state import Board, DeckOrigin, NoOrigin, PlayingAreaOrigin, StackOrigin


logger = logging.getLogger(__name__)

DRAW_COUNT = 3


# =============================================================================
# Move rules
# =============================================================================

def is_alternating(cards: list[Card]) -> bool:
    """Adjacent cards differ in color."""
    return all(upper.color != lower.color for upper, lower in zip(cards, cards[1:]))


def is_descending(cards: list[Card]) -> bool:
    """Each card is exactly one rank below the card above it."""
    return all(upper.number - 1 == lower.number for upper, lower in zip(cards, cards[1:]))


def is_movable_run(cards: list[Card]) -> bool:
    return is_alternating(cards) and is_descending(cards)


def can_stack_on(above: Slot, card: Card) -> bool:
    """Whether card may be placed directly below the slot above."""
    if not isinstance(above.state, Occupied):
        return False
    upper = above.state.card
    return upper.color != card.color and upper.number - 1 == card.number


def can_add_to_foundation(pile: Slot, card: Card) -> bool:
    """Empty piles take aces; occupied piles take the next card of their suit."""
    if isinstance(pile.state, Empty):
        return card.number == 1
    if isinstance(pile.state, Occupied):
        top = pile.state.card
        return card.suit == top.suit and card.number == top.number + 1
    return False


# =============================================================================
# Reducer
# =============================================================================

@dataclass
class Reducer:
    """
    Reducer applies actions to the board.

    Stateless - all state is in Board.
    """
    draw_count: int = DRAW_COUNT

    def apply(self, board: Board, action: Action) -> ActionResult:
        """
        Apply an action to the board.

        Returns ActionResult with the new board or an error.
        """
        validation_error = self._validate_action(action)
        if validation_error:
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION")

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        try:
            new_board = handler(board, action)
        except DecodeError as e:
            logger.debug("Rejected %s: %s", action.event_id, e)
            return ActionResult.failure(str(e), error_code="DECODE_ERROR", details=e.to_dict())
        except NotImplementedError as e:
            return ActionResult.failure(str(e), error_code="NOT_IMPLEMENTED")

        changed = new_board is not board and new_board != board
        if not changed:
            logger.debug("Click on %s left the board unchanged", action.event_id)
        return ActionResult.success_with_state(new_board, changed=changed)

    def apply_click(self, board: Board, event_id: str) -> ActionResult:
        """Decode an event id and apply it."""
        try:
            target = parse_event(event_id)
        except DecodeError as e:
            logger.debug("Could not decode event %r: %s", event_id, e)
            return ActionResult.failure(str(e), error_code="DECODE_ERROR", details=e.to_dict())

        action = Action(
            action_type=target.kind,
            slot_id=target.slot_id,
            index=target.index,
            event_id=event_id,
        )
        return self.apply(board, action)

    def _validate_action(self, action: Action) -> str | None:
        """
        Validate that an action carries what its handler needs.

        Returns error message if invalid, None if valid.
        """
        if action.action_type == ActionType.PLAYING_AREA and not action.slot_id:
            return "Tableau click needs a slot id"
        if action.action_type == ActionType.ACE:
            if action.index is None or not 0 <= action.index < FOUNDATION_COUNT:
                return f"Foundation index must be 0-{FOUNDATION_COUNT - 1}, got {action.index}"
        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.DECK: self._handle_deck,
            ActionType.STACK: self._handle_stack,
            ActionType.PLAYING_AREA: self._handle_playing_area,
            ActionType.ACE: self._handle_ace,
            ActionType.RETURN: self._handle_return,
            ActionType.CLEAR_SELECTION: self._handle_clear_selection,
        }
        return handlers.get(action_type)

    def _handle_deck(self, board: Board, action: Action) -> Board:
        """Draw up to three cards onto the waste pile."""
        if board.deck is not None:
            # TODO: redeal the waste pile once its order is decided
            raise NotImplementedError("Redealing the waste pile is not implemented")

        if not board.available_cards:
            raise InvariantError("Draw pile is empty but the redeal marker is not set")

        available = board.available_cards.copy()
        stack = board.stack
        for _ in range(min(self.draw_count, len(available))):
            stack = stack.push(available.pop())

        deck = Slot(DECK_MARKER_ID, EMPTY) if not available else None
        return board._copy_with(available_cards=available, stack=stack, deck=deck)

    def _handle_stack(self, board: Board, action: Action) -> Board:
        """Lift the top card of the waste pile into the selection."""
        if board.selection.is_active:
            return board
        if board.stack.is_empty:
            return board

        card, stack = board.stack.pop()
        selection = board.selection.with_contents(StackOrigin(), [card])
        return board._copy_with(stack=stack, selection=selection)

    def _handle_playing_area(self, board: Board, action: Action) -> Board:
        """
        Handle a tableau click.

        Occupied slot: lift the run below it if it alternates colors and
        descends by one. Empty slot: place the selection there if it
        starts a column or continues the card above.
        """
        column, row = decode_tableau_id(action.slot_id)
        tableau = board.playing_area
        selection = board.selection
        slot = tableau.at(column, row)

        if isinstance(slot.state, Occupied):
            if selection.is_active:
                return board
            run = tableau.run_from(column, row)
            if not is_movable_run(run):
                logger.debug("Run from %s is not movable", slot.id)
                return board
            selection = selection.with_contents(PlayingAreaOrigin(slot.id), run)
            tableau = tableau.cleared_from(column, row)

        elif isinstance(slot.state, Empty):
            if not selection.is_active:
                return board
            cards = selection.cards
            if row != 0 and not can_stack_on(tableau.at(column, row - 1), cards[0]):
                logger.debug("%s cannot go on %s", cards[0], tableau.at(column, row - 1).id)
                return board
            placed = tableau.placed(slot.id, cards)
            if placed is None:
                return board
            tableau = placed
            selection = selection.cleared()

        return board._copy_with(playing_area=tableau.cascaded(), selection=selection)

    def _handle_ace(self, board: Board, action: Action) -> Board:
        """Move a single selected card onto a foundation pile."""
        cards = board.selection.cards
        if len(cards) != 1:
            return board

        pile = board.aces[action.index]
        if not can_add_to_foundation(pile, cards[0]):
            return board

        new_board = board.with_ace(action.index, pile.with_state(Occupied(cards[0])))
        return new_board._copy_with(selection=board.selection.cleared())

    def _handle_return(self, board: Board, action: Action) -> Board:
        """Put the selection back where it was lifted from."""
        selection = board.selection
        origin = selection.origin
        if isinstance(origin, NoOrigin):
            return board

        cards = selection.cards
        if isinstance(origin, PlayingAreaOrigin):
            placed = board.playing_area.placed(origin.slot_id, cards)
            if placed is None:
                raise InvariantError(f"Selection no longer fits at its origin {origin.slot_id}")
            new_board = board._copy_with(playing_area=placed.cascaded())
        elif isinstance(origin, (StackOrigin, DeckOrigin)):
            new_board = board._copy_with(stack=board.stack.push(cards[0]))
        else:
            raise InvariantError(f"Unknown selection origin: {origin!r}")

        return new_board._copy_with(selection=selection.cleared())

    def _handle_clear_selection(self, board: Board, action: Action) -> Board:
        """Drop the selection without putting the cards back."""
        return board._copy_with(selection=board.selection.cleared())


def apply_action(board: Board, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    return Reducer().apply(board, action)


def apply_click(board: Board, event_id: str) -> ActionResult:
    """Convenience function to apply a click by event id."""
    return Reducer().apply_click(board, event_id)
