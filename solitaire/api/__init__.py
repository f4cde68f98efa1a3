"""
API Module - Interface for the presentation layer.

Exposes the engine via a stateless REST API. The client:
1. Asks for a new deal
2. Forwards every click as (event id, current board)
3. Renders the board it gets back

No game state is kept server-side.
"""

from .schemas import (
    # Requests
    StartRequest,
    ClickRequest,
    ClearSelectionRequest,
    # Responses
    BoardResponse,
    ClickResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    BoardSummary,
    ErrorCode,
    OriginKind,
)
from .service import SolitaireService, summarize_board
from .app import create_app

__all__ = [
    # Requests
    "StartRequest",
    "ClickRequest",
    "ClearSelectionRequest",
    # Responses
    "BoardResponse",
    "ClickResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "BoardSummary",
    "ErrorCode",
    "OriginKind",
    # Service
    "SolitaireService",
    "summarize_board",
    "create_app",
]
