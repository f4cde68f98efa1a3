"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between the presentation layer and the
engine. The board itself travels as the serialized snapshot described in
engine_core/serialize.py; the engine decodes and validates it, so here it
is typed as a plain JSON object.

Error Codes:
- DECODE_ERROR: Event id or board payload could not be decoded
- NOT_IMPLEMENTED: The click hit a feature that does not exist yet (redeal)
- VALIDATION_ERROR: Request body does not match the schema
- DEBUG_DISABLED: Debug endpoint called while debug routes are off
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


API_VERSION = "v1"


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    DECODE_ERROR = "DECODE_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DEBUG_DISABLED = "DEBUG_DISABLED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class OriginKind(str, Enum):
    """Where the current selection came from."""
    NONE = "none"
    DECK = "deck"
    STACK = "stack"
    PLAYING_AREA = "playing_area"


# =============================================================================
# Requests
# =============================================================================

class StartRequest(BaseModel):
    """
    Request to deal a new game.

    POST /api/v1/start
    """
    seed: Optional[int] = Field(None, description="Shuffle seed for a reproducible deal")


class ClickRequest(BaseModel):
    """
    Request to apply a click.

    POST /api/v1/click
    """
    event_id: str = Field(description="Clicked element id, e.g. 'deck', 'a3', 'ace0', 'return'")
    board: dict[str, Any] = Field(description="Current serialized board")


class ClearSelectionRequest(BaseModel):
    """
    Debug request to drop the current selection.

    POST /api/v1/debug/clear-selection
    """
    board: dict[str, Any] = Field(description="Current serialized board")


# =============================================================================
# Responses
# =============================================================================

class BoardSummary(BaseModel):
    """Human-readable digest of a board, for logs and debugging UIs."""
    draw_pile_count: int
    redeal_available: bool = False
    waste_count: int = 0
    waste_top: Optional[str] = None
    selection_origin: OriginKind = OriginKind.NONE
    selection_origin_id: Optional[str] = None
    selection: list[str] = Field(default_factory=list)
    tableau_card_count: int = 0
    foundations: list[Optional[str]] = Field(default_factory=list)


class BoardResponse(BaseModel):
    """A serialized board."""
    board: dict[str, Any]
    summary: BoardSummary
    api_version: str = API_VERSION


class ClickResponse(BaseModel):
    """
    Result of a click.

    changed is false when the move was illegal and the board came back
    as it was sent.
    """
    event_id: str
    changed: bool
    board: dict[str, Any]
    summary: BoardSummary
    api_version: str = API_VERSION


class ErrorResponse(BaseModel):
    """
    Error response.

    Returned for any 4xx or 5xx status.
    """
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
    api_version: str = API_VERSION


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    env: str
