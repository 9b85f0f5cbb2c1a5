"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Front end picks a grid and player count → create_session()
2. During the game:
   - Front end submits a move → submit_move()
   - Engine validates, applies, resolves and evaluates
   - Session swaps in the GameSession the reducer returned
3. "Restart" keeps the config and starts a fresh game
4. "New setup" replaces the config and starts a fresh game
5. end_session() drops the session from memory

PERSISTENCE RULES:
- Sessions are in-memory only
- The manager never edits a GameSession; it replaces it

A move runs to completion before submit_move() returns. While it runs
the session is marked as resolving and a second submission for the
same session is rejected with MOVE_IN_PROGRESS.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import threading
import time
import uuid

from ..config import SESSION_TTL_SECONDS
from ..engine_core.action import Move, MoveResult, RuleViolation
from ..engine_core.reducer import Reducer, new_session
from ..engine_core.state import GameConfig, GameSession

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # A player won
    ABANDONED = "abandoned"  # Ended before a winner


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The current GameSession value
    - Lifecycle state and timestamps
    - The in-flight flag for move submission

    The session is destroyed when it is ended or goes stale.
    """
    session_id: str
    game: GameSession
    created_at: float

    state: SessionState = SessionState.ACTIVE
    updated_at: float = 0.0
    resolving: bool = False

    # Result of the last accepted move, for front ends that poll
    last_result: MoveResult | None = None

    # Session metadata
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    @property
    def accepting_moves(self) -> bool:
        """True when no move is resolving and the game is not over."""
        return not self.resolving and not self.game.is_terminal


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from configs
    - Route moves through the reducer
    - Restart and reconfigure games
    - Clean up ended sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, reducer: Reducer | None = None):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self.reducer = reducer or Reducer()

    def create_session(
        self,
        game_config: GameConfig,
        metadata: dict[str, Any] | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            game_config: Grid size, player count and rotation policy
            metadata: Optional caller data kept with the session

        Returns:
            New Session with player 1 to move
        """
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            game=new_session(game_config),
            created_at=now,
            updated_at=now,
            metadata=metadata or {},
        )
        with self._lock:
            self._sessions[session.session_id] = session

        logger.info(
            "Created session %s (%dx%d, %d players)",
            session.session_id, game_config.rows, game_config.cols,
            game_config.player_count,
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        with self._lock:
            return self._sessions.get(session_id)

    def submit_move(self, session_id: str, row: int, col: int, player: int) -> MoveResult:
        """
        Submit a move for a session.

        Raises KeyError if the session does not exist. Rule violations
        come back as failed MoveResults and leave the session as it was.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise KeyError(session_id)
            if session.resolving:
                return MoveResult.failure(
                    "A move is still being resolved", RuleViolation.MOVE_IN_PROGRESS
                )
            session.resolving = True

        try:
            result = self.reducer.apply(session.game, Move(row=row, col=col, player=player))
            if result.success:
                session.game = result.session
                session.last_result = result
                session.updated_at = time.time()
                if result.session.is_terminal:
                    session.state = SessionState.GAME_OVER
                    logger.info(
                        "Session %s finished, player %d wins",
                        session_id, result.session.winner,
                    )
            return result
        finally:
            session.resolving = False

    def restart_session(self, session_id: str) -> Session:
        """Start a fresh game with the same config."""
        session = self._require(session_id)
        return self._reset(session, session.game.config)

    def reconfigure_session(self, session_id: str, game_config: GameConfig) -> Session:
        """Start a fresh game with a new config."""
        session = self._require(session_id)
        return self._reset(session, game_config)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Returns False if the session did not exist.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False

        if session.state == SessionState.ACTIVE:
            session.state = SessionState.ABANDONED
        session.last_result = None
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions with a game in progress."""
        with self._lock:
            items = list(self._sessions.items())
        return [sid for sid, session in items if session.is_active()]

    def list_sessions(self) -> list[str]:
        """List IDs of all sessions held in memory."""
        with self._lock:
            return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = SESSION_TTL_SECONDS) -> int:
        """
        End sessions not touched for max_age_seconds.

        Sessions with a move still resolving are left alone. Returns the
        number of sessions removed.
        """
        current_time = time.time()
        with self._lock:
            to_remove = [
                session_id for session_id, session in self._sessions.items()
                if not session.resolving
                and current_time - session.updated_at > max_age_seconds
            ]

        removed = 0
        for session_id in to_remove:
            if self.end_session(session_id, reason="stale"):
                removed += 1
        return removed

    def _require(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        return session

    def _reset(self, session: Session, game_config: GameConfig) -> Session:
        with self._lock:
            if session.resolving:
                raise RuntimeError("Cannot reset a session while a move is resolving")
            session.game = new_session(game_config)
            session.state = SessionState.ACTIVE
            session.last_result = None
            session.updated_at = time.time()
        logger.info(
            "Reset session %s (%dx%d, %d players)",
            session.session_id, game_config.rows, game_config.cols,
            game_config.player_count,
        )
        return session
