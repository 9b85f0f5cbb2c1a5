"""
API Module - Front-end interface.

Exposes the engine via REST API. A front end:
1. Creates a game session with a grid and player count
2. Submits moves
3. Renders the returned state and explosion waves
4. Restarts or sets up a new game when asked

All state is session-scoped. No user accounts, nothing persisted.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    MoveRequest,
    # Responses
    GameStateResponse,
    MoveResponse,
    LegalMovesResponse,
    CapacityResponse,
    PresetsResponse,
    ErrorResponse,
    # Shared
    CellInfo,
    PlayerInfo,
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "MoveRequest",
    # Responses
    "GameStateResponse",
    "MoveResponse",
    "LegalMovesResponse",
    "CapacityResponse",
    "PresetsResponse",
    "ErrorResponse",
    # Shared
    "CellInfo",
    "PlayerInfo",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
