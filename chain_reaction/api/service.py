"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats responses for the front end

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .. import __version__
from ..config import DEFAULT_PRESET, GRID_PRESETS, MAX_PLAYERS, MIN_PLAYERS
from ..engine_core.action import MoveResult
from ..engine_core.move_generator import legal_moves
from ..engine_core.reducer import get_cell_capacity
from ..engine_core.state import GameConfig
from ..engine_core.geometry import capacity
from ..session import Session, SessionManager, SessionState
from .schemas import (
    CapacityResponse,
    CellInfo,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PlayerInfo,
    PresetsResponse,
    SessionStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service for front ends.

    Usage:
        service = APIService()

        # Create session
        state = service.create_session(CreateSessionRequest(rows=6, cols=8))

        # Place an orb
        response = service.submit_move(state.session_id, MoveRequest(row=0, col=0, player=1))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """
        Create a new game session.

        Raises ValueError for an invalid grid, preset or player count.
        """
        session = self.session_manager.create_session(self._config_from_request(request))
        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._build_game_state(session)

    def submit_move(
        self,
        session_id: str,
        request: MoveRequest,
    ) -> MoveResponse | ErrorResponse:
        """
        Submit a move and return the resolved state.

        Rule violations come back as ErrorResponse with the violation
        as error_code.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = self.session_manager.submit_move(
            session_id, request.row, request.col, request.player
        )
        if not result.success:
            return ErrorResponse(
                error=result.error or "Move rejected",
                error_code=ErrorCode(result.error_code),
                details={
                    "row": request.row,
                    "col": request.col,
                    "player": request.player,
                    "current_player": session.game.current_player,
                },
            )
        return self._move_to_response(session, result)

    def restart_session(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Start over with the same grid and players.
        """
        if not self.session_manager.get_session(session_id):
            return self._not_found(session_id)
        session = self.session_manager.restart_session(session_id)
        return self._build_game_state(session)

    def reconfigure_session(
        self,
        session_id: str,
        request: CreateSessionRequest,
    ) -> GameStateResponse | ErrorResponse:
        """
        Start a new game on the session with a different setup.

        Raises ValueError for an invalid config.
        """
        if not self.session_manager.get_session(session_id):
            return self._not_found(session_id)
        session = self.session_manager.reconfigure_session(
            session_id, self._config_from_request(request)
        )
        return self._build_game_state(session)

    def get_legal_moves(self, session_id: str) -> LegalMovesResponse | ErrorResponse:
        """
        List cells the current player may place on.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        moves = legal_moves(session.game)
        return LegalMovesResponse(
            session_id=session_id,
            player=None if session.game.is_terminal else session.game.current_player,
            cells=[move.coord for move in moves],
        )

    def get_capacity(self, rows: int, cols: int, row: int, col: int) -> CapacityResponse:
        """
        Capacity of a cell. Raises IllegalMoveError when off the grid.
        """
        return CapacityResponse(
            rows=rows,
            cols=cols,
            row=row,
            col=col,
            capacity=get_cell_capacity(rows, cols, row, col),
        )

    def get_presets(self) -> PresetsResponse:
        return PresetsResponse(
            presets=dict(GRID_PRESETS),
            default_preset=DEFAULT_PRESET,
            min_players=MIN_PLAYERS,
            max_players=MAX_PLAYERS,
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """
        List session IDs held in memory.
        """
        return self.session_manager.list_sessions()

    def health(self) -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="chain-reaction-engine",
            version=__version__,
        )

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _config_from_request(self, request: CreateSessionRequest) -> GameConfig:
        if request.preset:
            return GameConfig.from_preset(
                request.preset,
                player_count=request.player_count,
                skip_eliminated=request.skip_eliminated,
            )
        return GameConfig(
            rows=request.rows,
            cols=request.cols,
            player_count=request.player_count,
            skip_eliminated=request.skip_eliminated,
        )

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_state_to_status(self, session: Session) -> SessionStatus:
        """Convert session state to API status."""
        mapping = {
            SessionState.ACTIVE: SessionStatus.ACTIVE,
            SessionState.GAME_OVER: SessionStatus.GAME_OVER,
            SessionState.ABANDONED: SessionStatus.ABANDONED,
        }
        return mapping.get(session.state, SessionStatus.ACTIVE)

    def _move_to_response(self, session: Session, result: MoveResult) -> MoveResponse:
        """Convert an accepted MoveResult to MoveResponse."""
        return MoveResponse(
            session_id=session.session_id,
            success=True,
            changes=result.changes,
            explosions=result.explosions,
            waves=[list(wave) for wave in result.waves],
            ceiling_reached=result.ceiling_reached,
            game_state=self._build_game_state(session),
        )

    def _build_game_state(self, session: Session) -> GameStateResponse:
        """Build complete game state response."""
        game = session.game
        board = game.board
        cell_counts = board.cell_counts()
        orb_counts = board.orb_counts()

        players = [
            PlayerInfo(
                player=player,
                is_current_turn=(not game.is_terminal and player == game.current_player),
                cell_count=cell_counts.get(player, 0),
                orb_count=orb_counts.get(player, 0),
                is_eliminated=game.is_eliminated(player),
            )
            for player in game.players
        ]

        cells = [
            [
                CellInfo(
                    row=r,
                    col=c,
                    count=board.cells[board.index(r, c)].count,
                    owner=board.cells[board.index(r, c)].owner,
                    capacity=capacity(r, c, board.rows, board.cols),
                )
                for c in range(board.cols)
            ]
            for r in range(board.rows)
        ]

        return GameStateResponse(
            session_id=session.session_id,
            status=self._session_state_to_status(session),
            rows=board.rows,
            cols=board.cols,
            player_count=game.player_count,
            skip_eliminated=game.config.skip_eliminated,
            current_player=game.current_player,
            move_count=game.move_count,
            is_terminal=game.is_terminal,
            winner=game.winner,
            explosion_count=game.explosion_count,
            accepting_moves=session.accepting_moves,
            players=players,
            board=cells,
        )
