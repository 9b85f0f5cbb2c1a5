"""
FastAPI Application - REST API for a Chain Reaction front end.

Endpoints:
    GET    /api/v1/presets                        Grid presets and player limits
    GET    /api/v1/capacity                       Capacity of one cell
    POST   /api/v1/sessions                       Create game session
    GET    /api/v1/sessions                       List sessions
    GET    /api/v1/sessions/{id}                  Get game state
    DELETE /api/v1/sessions/{id}                  End session
    GET    /api/v1/sessions/{id}/state            Get game state
    POST   /api/v1/sessions/{id}/moves            Place an orb
    GET    /api/v1/sessions/{id}/legal-moves      Cells the current player may use
    POST   /api/v1/sessions/{id}/restart          Same setup, fresh board
    POST   /api/v1/sessions/{id}/setup            New setup, fresh board

Move Flow:
    1. POST /moves with row, col and player
    2. The move is validated, applied and fully resolved before the
       response is sent
    3. The response carries the new state, the explosion waves and
       accepting_moves, which tells the front end it may send the
       next move

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import ALLOWED_ORIGINS, CHAIN_REACTION_ENV
from ..engine_core.action import IllegalMoveError
from .service import APIService
from .schemas import (
    # Request models
    CreateSessionRequest,
    MoveRequest,
    # Response models
    CapacityResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    LegalMovesResponse,
    MoveResponse,
    PresetsResponse,
    SessionListResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)

# HTTP status for each error code
_STATUS_CODES = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.INVALID_CONFIG: 400,
    ErrorCode.OUT_OF_BOUNDS: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.OUT_OF_TURN: 409,
    ErrorCode.OWNERSHIP: 409,
    ErrorCode.GAME_ALREADY_OVER: 409,
    ErrorCode.MOVE_IN_PROGRESS: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Chain Reaction Engine API",
        description="""
Turn-based orb placement game engine.

## Move Flow

`POST /api/v1/sessions/{id}/moves` validates the move, places the orb,
resolves every chain reaction and checks for a winner before it
responds. `waves` lists the cells that exploded together in each pass.

## Error Codes

| Code | Description |
|------|-------------|
| `OUT_OF_TURN` | Move sent for a player whose turn it is not |
| `OUT_OF_BOUNDS` | Coordinate outside the grid |
| `OWNERSHIP` | Cell owned by another player |
| `GAME_ALREADY_OVER` | Game already has a winner |
| `MOVE_IN_PROGRESS` | Previous move still resolving |
| `INVALID_CONFIG` | Grid or player count out of range |
| `SESSION_NOT_FOUND` | Session does not exist |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or _STATUS_CODES.get(error_code, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_from(response: ErrorResponse) -> JSONResponse:
        return make_error_response(
            response.error_code, response.error, details=response.details
        )

    # =========================================================================
    # Setup Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/presets",
        response_model=PresetsResponse,
        tags=["Setup"],
        summary="List grid presets and player limits",
    )
    async def get_presets() -> PresetsResponse:
        return api_service.get_presets()

    @app.get(
        "/api/v1/capacity",
        response_model=CapacityResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Setup"],
        summary="Capacity of a cell",
    )
    async def get_capacity(
        rows: Annotated[int, Query(description="Grid rows")],
        cols: Annotated[int, Query(description="Grid columns")],
        row: Annotated[int, Query(description="Cell row")],
        col: Annotated[int, Query(description="Cell column")],
    ) -> Union[CapacityResponse, JSONResponse]:
        """Orb count at which the cell explodes: 2 in corners, 3 on edges, 4 inside."""
        try:
            return api_service.get_capacity(rows, cols, row, col)
        except IllegalMoveError as e:
            return make_error_response(ErrorCode.OUT_OF_BOUNDS, str(e))

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid setup"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: CreateSessionRequest,
    ) -> Union[GameStateResponse, JSONResponse]:
        """
        Create a new game session with an empty board and player 1 to move.

        Use `preset` for one of the standard grids, or `rows` and `cols`.
        """
        try:
            return api_service.create_session(body)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_CONFIG, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release it."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=GameStateResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Move still resolving"},
        },
        tags=["Sessions"],
        summary="Restart with the same setup",
    )
    async def restart_session(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        try:
            response = api_service.restart_session(session_id)
        except RuntimeError as e:
            return make_error_response(ErrorCode.MOVE_IN_PROGRESS, str(e))
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/setup",
        response_model=GameStateResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid setup"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Move still resolving"},
        },
        tags=["Sessions"],
        summary="Start a new game with a different setup",
    )
    async def setup_session(
        session_id: str,
        body: CreateSessionRequest,
    ) -> Union[GameStateResponse, JSONResponse]:
        try:
            response = api_service.reconfigure_session(session_id, body)
        except ValueError as e:
            return make_error_response(ErrorCode.INVALID_CONFIG, str(e))
        except RuntimeError as e:
            return make_error_response(ErrorCode.MOVE_IN_PROGRESS, str(e))
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the complete current game state for display."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Coordinate off the grid"},
            404: {"model": ErrorResponse, "description": "Session not found"},
            409: {"model": ErrorResponse, "description": "Move rejected by the rules"},
        },
        tags=["Game"],
        summary="Place an orb",
    )
    async def submit_move(
        session_id: str,
        body: MoveRequest,
    ) -> Union[MoveResponse, JSONResponse]:
        """
        Place an orb for `player` at (`row`, `col`).

        **Request Body:**
        ```json
        {"row": 0, "col": 0, "player": 1}
        ```
        """
        response = api_service.submit_move(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/legal-moves",
        response_model=LegalMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Cells the current player may place on",
    )
    async def get_legal_moves(session_id: str) -> Union[LegalMovesResponse, JSONResponse]:
        response = api_service.get_legal_moves(session_id)
        if isinstance(response, ErrorResponse):
            return error_from(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return api_service.health()

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Chain Reaction Engine API",
            "version": __version__,
            "env": CHAIN_REACTION_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    logger.debug("Created app (env=%s)", CHAIN_REACTION_ENV)
    return app


# For running directly: uvicorn chain_reaction.api.app:app
app = create_app()
