"""
Tests for the session manager.

Tests:
- Session lifecycle (create, end, cleanup)
- Move routing and game over
- Restart and new setup
- The in-flight guard on move submission
"""

import threading
import time

import pytest

from ..engine_core.action import RuleViolation
from ..engine_core.state import Board, GameConfig
from ..session import SessionManager, SessionState


@pytest.fixture
def manager():
    """Create a fresh session manager."""
    return SessionManager()


@pytest.fixture
def session(manager):
    """A 6x8 two-player session."""
    return manager.create_session(GameConfig(rows=6, cols=8, player_count=2))


class TestSessionLifecycle:
    """Tests for creating and ending sessions."""

    def test_create_session(self, manager, session):
        assert session.session_id is not None
        assert session.state == SessionState.ACTIVE
        assert session.game.board == Board.empty(6, 8)
        assert session.game.current_player == 1
        assert session.accepting_moves
        assert manager.get_session(session.session_id) is session

    def test_metadata_kept(self, manager):
        session = manager.create_session(GameConfig(), metadata={"table": "blue"})
        assert session.metadata == {"table": "blue"}

    def test_unknown_session(self, manager):
        assert manager.get_session("no-such-session") is None

    def test_end_session(self, manager, session):
        assert manager.end_session(session.session_id)

        assert manager.get_session(session.session_id) is None
        assert session.state == SessionState.ABANDONED
        assert not manager.end_session(session.session_id)

    def test_list_active_sessions(self, manager, session):
        other = manager.create_session(GameConfig(player_count=3))

        active = manager.list_active_sessions()

        assert set(active) == {session.session_id, other.session_id}
        assert set(manager.list_sessions()) == set(active)

    def test_cleanup_stale_sessions(self, manager, session):
        fresh = manager.create_session(GameConfig())
        session.updated_at = time.time() - 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.get_session(session.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh


class TestMoveSubmission:
    """Tests for submit_move()."""

    def test_accepted_move_replaces_game(self, manager, session):
        before = session.game

        result = manager.submit_move(session.session_id, 0, 0, 1)

        assert result.success
        assert session.game is result.session
        assert session.game is not before
        assert session.game.current_player == 2
        assert session.last_result is result
        assert not session.resolving

    def test_rejected_move_keeps_game(self, manager, session):
        before = session.game

        result = manager.submit_move(session.session_id, 0, 0, 2)

        assert not result.success
        assert result.violation == RuleViolation.OUT_OF_TURN
        assert session.game is before

    def test_unknown_session_raises(self, manager):
        with pytest.raises(KeyError):
            manager.submit_move("no-such-session", 0, 0, 1)

    def test_move_rejected_while_resolving(self, manager, session):
        session.resolving = True

        result = manager.submit_move(session.session_id, 0, 0, 1)

        assert not result.success
        assert result.violation == RuleViolation.MOVE_IN_PROGRESS
        assert session.game.move_count == 0
        assert not session.accepting_moves

    def test_game_over_marks_session(self, manager):
        session = manager.create_session(GameConfig(rows=3, cols=3, player_count=2))
        sid = session.session_id

        # The corner explosion captures P2's only cell on move 3
        for row, col, player in [(0, 0, 1), (0, 1, 2), (0, 0, 1)]:
            assert manager.submit_move(sid, row, col, player).success

        assert session.game.is_terminal
        assert session.game.winner == 1
        assert session.state == SessionState.GAME_OVER
        assert not session.accepting_moves
        assert sid not in manager.list_active_sessions()


class TestRestartAndSetup:
    """Tests for restart_session() and reconfigure_session()."""

    def test_restart_keeps_config(self, manager, session):
        manager.submit_move(session.session_id, 0, 0, 1)

        restarted = manager.restart_session(session.session_id)

        assert restarted is session
        assert session.game.move_count == 0
        assert session.game.board == Board.empty(6, 8)
        assert session.game.config == GameConfig(rows=6, cols=8, player_count=2)
        assert session.last_result is None

    def test_restart_after_game_over_reactivates(self, manager):
        session = manager.create_session(GameConfig(rows=3, cols=3))
        for row, col, player in [(0, 0, 1), (0, 1, 2), (0, 0, 1)]:
            manager.submit_move(session.session_id, row, col, player)
        assert session.state == SessionState.GAME_OVER

        manager.restart_session(session.session_id)

        assert session.state == SessionState.ACTIVE
        assert not session.game.is_terminal

    def test_reconfigure_replaces_config(self, manager, session):
        game_config = GameConfig(rows=7, cols=7, player_count=4, skip_eliminated=True)

        manager.reconfigure_session(session.session_id, game_config)

        assert session.game.config == game_config
        assert session.game.board == Board.empty(7, 7)
        assert session.game.current_player == 1

    def test_reset_refused_while_resolving(self, manager, session):
        manager.submit_move(session.session_id, 0, 0, 1)
        game = session.game
        session.resolving = True

        with pytest.raises(RuntimeError):
            manager.restart_session(session.session_id)
        with pytest.raises(RuntimeError):
            manager.reconfigure_session(session.session_id, GameConfig(rows=7, cols=7))
        assert session.game is game

    def test_restart_unknown_session(self, manager):
        with pytest.raises(KeyError):
            manager.restart_session("no-such-session")


class TestConcurrentAccess:
    """The registry can be shared between threads."""

    def test_cleanup_runs_alongside_create(self, manager):
        for _ in range(500):
            stale = manager.create_session(GameConfig())
            stale.updated_at = 0.0

        stop = threading.Event()
        errors = []

        def keep_creating():
            try:
                while not stop.is_set():
                    manager.create_session(GameConfig())
            except Exception as e:
                errors.append(e)

        worker = threading.Thread(target=keep_creating)
        worker.start()
        try:
            removed = 0
            for _ in range(50):
                manager.list_active_sessions()
                manager.list_sessions()
                removed += manager.cleanup_stale_sessions(max_age_seconds=3600)
        finally:
            stop.set()
            worker.join()

        assert errors == []
        assert removed == 500

    def test_cleanup_skips_resolving_session(self, manager, session):
        session.updated_at = 0.0
        session.resolving = True

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 0
        assert manager.get_session(session.session_id) is session

        session.resolving = False
        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
