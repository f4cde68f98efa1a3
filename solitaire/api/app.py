"""
FastAPI Application - REST API for the presentation layer.

Endpoints:
    GET    /                                 API info
    GET    /health                           Health check
    POST   /api/v1/start                     Deal a new game
    POST   /api/v1/click                     Apply a click to a board
    POST   /api/v1/debug/clear-selection     Drop the selection (debug only)

The API is stateless: the client sends the current serialized board with
every click and renders the board it gets back.

Status codes:
    200  click applied, or rejected as an illegal move (changed=false)
    400  DECODE_ERROR     bad event id or board payload
    404  DEBUG_DISABLED   debug route called while debug routes are off
    422  VALIDATION_ERROR request body does not match the schema
    500  INTERNAL_ERROR   the engine broke one of its own invariants
    501  NOT_IMPLEMENTED  redeal from the waste pile
"""

from typing import Optional, Union
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, load_settings
from ..engine_core import SolitaireError
from .service import SolitaireService
from .schemas import (
    StartRequest,
    ClickRequest,
    ClearSelectionRequest,
    BoardResponse,
    ClickResponse,
    ErrorResponse,
    HealthResponse,
    ErrorCode,
)


logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.DECODE_ERROR: 400,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.DEBUG_DISABLED: 404,
    ErrorCode.NOT_IMPLEMENTED: 501,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(
    service: Optional[SolitaireService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional SolitaireService instance (creates new if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or (service.settings if service else load_settings())
    api_service = service or SolitaireService(settings=settings)
    logging.getLogger("solitaire").setLevel(settings.log_level)

    app = FastAPI(
        title="Solitaire Engine API",
        description="""
Klondike solitaire rule engine.

Send the clicked element id together with the current board; the
response carries the next board. Illegal moves return the same board
with `changed=false`.

## Event ids

| Id | Target |
|----|--------|
| `deck`, `deck0` | Draw pile |
| `stack`, `s0`-`s8`, `selection<d>` | Waste pile |
| `a0`-`gc` | Tableau slot (column a-g, row hex 0-c) |
| `ace0`-`ace3` | Foundation pile |
| `return` | Return the selection to where it came from |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Wrap an ErrorResponse with its HTTP status."""
        return JSONResponse(
            status_code=_STATUS_BY_CODE.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(ErrorResponse(
            error="Request body does not match the schema",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": jsonable_encoder(exc.errors())},
        ))

    @app.exception_handler(SolitaireError)
    async def engine_error(request: Request, exc: SolitaireError) -> JSONResponse:
        logger.error("Engine error on %s: %s", request.url.path, exc)
        return make_error_response(ErrorResponse(
            error=str(exc),
            error_code=ErrorCode.INTERNAL_ERROR,
        ))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/start",
        response_model=BoardResponse,
        tags=["Game"],
        summary="Deal a new game",
    )
    async def start(body: Optional[StartRequest] = None) -> BoardResponse:
        """
        Deal a new game.

        24 cards stay in the draw pile and 28 are dealt to the tableau.
        Pass a `seed` for a reproducible deal.
        """
        seed = body.seed if body else None
        return api_service.start(seed=seed)

    @app.post(
        "/api/v1/click",
        response_model=ClickResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed event id or board"},
            501: {"model": ErrorResponse, "description": "Feature not implemented"},
        },
        tags=["Game"],
        summary="Apply a click to the board",
    )
    async def click(body: ClickRequest) -> Union[ClickResponse, JSONResponse]:
        """Apply a click and return the next board."""
        response = api_service.handle_click(body.event_id, body.board)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Debug Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/debug/clear-selection",
        response_model=BoardResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Malformed board"},
            404: {"model": ErrorResponse, "description": "Debug routes disabled"},
        },
        tags=["Debug"],
        summary="Drop the current selection",
    )
    async def clear_selection(body: ClearSelectionRequest) -> Union[BoardResponse, JSONResponse]:
        """
        Forcibly clear the selection.

        The selected cards are discarded, not returned. Test escape hatch,
        not part of normal play.
        """
        if not settings.enable_debug_routes:
            return make_error_response(ErrorResponse(
                error="Debug routes are disabled",
                error_code=ErrorCode.DEBUG_DISABLED,
            ))
        response = api_service.debug_clear_selection(body.board)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health & Info
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(version=__version__, env=settings.env)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Solitaire Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn solitaire.api.app:app
app = create_app()
