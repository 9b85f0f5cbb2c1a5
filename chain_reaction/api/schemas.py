"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a front end and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- INVALID_CONFIG: Grid size or player count out of range
- OUT_OF_TURN / OUT_OF_BOUNDS / OWNERSHIP / GAME_ALREADY_OVER: Move rejected by the rules
- MOVE_IN_PROGRESS: Previous move on the session has not finished resolving
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..config import DEFAULT_COLS, DEFAULT_PLAYERS, DEFAULT_ROWS


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_CONFIG = "INVALID_CONFIG"
    OUT_OF_TURN = "OUT_OF_TURN"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    OWNERSHIP = "OWNERSHIP"
    GAME_ALREADY_OVER = "GAME_ALREADY_OVER"
    MOVE_IN_PROGRESS = "MOVE_IN_PROGRESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CellInfo(BaseModel):
    """A single cell for display."""
    row: int
    col: int
    count: int = 0
    owner: Optional[int] = Field(None, description="Player number, null when empty")
    capacity: int = Field(description="Orb count at which the cell explodes")

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    player: int
    is_current_turn: bool = False
    cell_count: int = 0
    orb_count: int = 0
    is_eliminated: bool = False


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session (or set up a new game on one)."""
    rows: int = Field(DEFAULT_ROWS, description="Grid rows")
    cols: int = Field(DEFAULT_COLS, description="Grid columns")
    player_count: int = Field(DEFAULT_PLAYERS, description="Number of players (2-6)")
    preset: Optional[str] = Field(
        None, description="Grid preset such as '6x8'; overrides rows and cols"
    )
    skip_eliminated: bool = Field(
        False, description="Skip players who have lost all their cells"
    )


class MoveRequest(BaseModel):
    """Request to place an orb."""
    row: int = Field(..., description="Zero-based row")
    col: int = Field(..., description="Zero-based column")
    player: int = Field(..., description="Player making the move")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    rows: int
    cols: int
    player_count: int
    skip_eliminated: bool = False
    current_player: int
    move_count: int = 0
    is_terminal: bool = False
    winner: Optional[int] = None
    explosion_count: int = Field(0, description="Explosions caused by the last move")
    accepting_moves: bool = Field(
        True, description="False while a move resolves or after the game ends"
    )
    players: list[PlayerInfo] = Field(default_factory=list)
    board: list[list[CellInfo]] = Field(default_factory=list)
    api_version: str = "v1"


class MoveResponse(BaseModel):
    """
    Response after an accepted move.

    waves lists, per resolver pass, the cells that exploded together.
    Front ends can use it to pace explosion animations.
    """
    session_id: str
    success: bool = True
    changes: list[str] = Field(default_factory=list)
    explosions: int = 0
    waves: list[list[tuple[int, int]]] = Field(default_factory=list)
    ceiling_reached: bool = False
    game_state: GameStateResponse
    api_version: str = "v1"


class LegalMovesResponse(BaseModel):
    """Cells the current player may place on."""
    session_id: str
    player: Optional[int] = None
    cells: list[tuple[int, int]] = Field(default_factory=list)


class CapacityResponse(BaseModel):
    """Capacity of one cell on a grid."""
    rows: int
    cols: int
    row: int
    col: int
    capacity: int


class PresetsResponse(BaseModel):
    """Grid presets and player limits for setup screens."""
    presets: dict[str, tuple[int, int]]
    default_preset: str
    min_players: int
    max_players: int


class SessionListResponse(BaseModel):
    """Response listing sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
