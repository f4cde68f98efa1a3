"""
API Service - Business logic layer between API and engine.

The service:
1. Deals new boards
2. Decodes incoming boards and click ids
3. Runs the reducer
4. Formats responses

It keeps no game state: every call receives the board and returns the
next one. This layer is framework-agnostic (used by FastAPI and the CLI).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import logging
import random

from ..config import Settings, load_settings
from ..engine_core import (
    Action,
    Board,
    DecodeError,
    DeckOrigin,
    PlayingAreaOrigin,
    Reducer,
    StackOrigin,
    board_from_dict,
    board_to_dict,
    new_board,
)
from .schemas import (
    BoardResponse,
    BoardSummary,
    ClickResponse,
    ErrorCode,
    ErrorResponse,
    OriginKind,
)


logger = logging.getLogger(__name__)


def summarize_board(board: Board) -> BoardSummary:
    """Build the digest sent next to every board."""
    origin = board.selection.origin
    if isinstance(origin, PlayingAreaOrigin):
        origin_kind, origin_id = OriginKind.PLAYING_AREA, origin.slot_id
    elif isinstance(origin, StackOrigin):
        origin_kind, origin_id = OriginKind.STACK, None
    elif isinstance(origin, DeckOrigin):
        origin_kind, origin_id = OriginKind.DECK, None
    else:
        origin_kind, origin_id = OriginKind.NONE, None

    return BoardSummary(
        draw_pile_count=len(board.available_cards),
        redeal_available=board.deck is not None,
        waste_count=len(board.stack.contents),
        waste_top=board.stack.top.label if board.stack.top else None,
        selection_origin=origin_kind,
        selection_origin_id=origin_id,
        selection=[card.label for card in board.selection.cards],
        tableau_card_count=board.playing_area.card_count,
        foundations=[slot.card.label if slot.card else None for slot in board.aces],
    )


def _decode_error_response(error: DecodeError) -> ErrorResponse:
    return ErrorResponse(
        error=str(error),
        error_code=ErrorCode.DECODE_ERROR,
        details=error.to_dict(),
    )


@dataclass
class SolitaireService:
    """
    Main API service.

    Usage:
        service = SolitaireService()

        # Deal
        response = service.start(seed=7)

        # Click
        response = service.handle_click("deck", response.board)
    """
    reducer: Reducer = field(default_factory=Reducer)
    settings: Settings = field(default_factory=load_settings)

    def start(self, seed: int | None = None) -> BoardResponse:
        """Deal a new game."""
        if seed is None:
            seed = self.settings.seed
        board = new_board(rng=random.Random(seed))
        logger.info("Dealt new game (seed=%s)", seed)
        return BoardResponse(board=board_to_dict(board), summary=summarize_board(board))

    def handle_click(
        self, event_id: str, board_payload: dict[str, Any]
    ) -> ClickResponse | ErrorResponse:
        """
        Apply a click to a serialized board.

        Illegal moves come back with changed=False; malformed ids or
        boards come back as an ErrorResponse.
        """
        try:
            board = board_from_dict(board_payload)
        except DecodeError as e:
            logger.warning("Rejected malformed board for %r: %s", event_id, e)
            return _decode_error_response(e)

        result = self.reducer.apply_click(board, event_id)
        if not result.success:
            logger.warning("Click %r failed: %s", event_id, result.error)
            return ErrorResponse(
                error=result.error,
                error_code=ErrorCode.__members__.get(result.error_code, ErrorCode.INTERNAL_ERROR),
                details=result.details or None,
            )

        return ClickResponse(
            event_id=event_id,
            changed=result.changed,
            board=board_to_dict(result.new_state),
            summary=summarize_board(result.new_state),
        )

    def debug_clear_selection(self, board_payload: dict[str, Any]) -> BoardResponse | ErrorResponse:
        """Drop the selection without returning the cards."""
        try:
            board = board_from_dict(board_payload)
        except DecodeError as e:
            return _decode_error_response(e)

        result = self.reducer.apply(board, Action.clear_selection())
        return BoardResponse(
            board=board_to_dict(result.new_state),
            summary=summarize_board(result.new_state),
        )
