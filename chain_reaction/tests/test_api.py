"""
Tests for API layer.

Tests:
- API service methods
- HTTP endpoints and status codes
- Error responses for rule violations
- OpenAPI schema
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    MoveRequest,
    SessionStatus,
)
from ..api.service import APIService


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    def test_create_session(self, service):
        response = service.create_session(CreateSessionRequest(rows=6, cols=8, player_count=3))

        assert isinstance(response, GameStateResponse)
        assert response.status == SessionStatus.ACTIVE
        assert (response.rows, response.cols) == (6, 8)
        assert len(response.players) == 3
        assert response.players[0].is_current_turn
        assert response.accepting_moves
        assert len(response.board) == 6
        assert len(response.board[0]) == 8
        assert response.board[0][0].capacity == 2
        assert response.board[2][3].capacity == 4

    def test_create_session_from_preset(self, service):
        response = service.create_session(CreateSessionRequest(preset="8x6"))
        assert (response.rows, response.cols) == (8, 6)

    def test_create_session_invalid_config(self, service):
        with pytest.raises(ValueError):
            service.create_session(CreateSessionRequest(player_count=7))

    def test_submit_move(self, service):
        state = service.create_session(CreateSessionRequest())

        response = service.submit_move(state.session_id, MoveRequest(row=0, col=0, player=1))

        assert response.success
        assert response.game_state.current_player == 2
        assert response.game_state.board[0][0].owner == 1
        assert response.game_state.players[0].cell_count == 1

    def test_submit_move_violation(self, service):
        state = service.create_session(CreateSessionRequest())

        response = service.submit_move(state.session_id, MoveRequest(row=0, col=0, player=2))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.OUT_OF_TURN
        assert response.details["current_player"] == 1

    def test_unknown_session(self, service):
        response = service.get_game_state("no-such-session")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_legal_moves(self, service):
        state = service.create_session(CreateSessionRequest())
        service.submit_move(state.session_id, MoveRequest(row=0, col=0, player=1))

        response = service.get_legal_moves(state.session_id)

        assert response.player == 2
        assert len(response.cells) == 47
        assert (0, 0) not in response.cells

    def test_end_session(self, service):
        state = service.create_session(CreateSessionRequest())

        assert service.end_session(state.session_id)
        assert state.session_id not in service.list_sessions()


class TestHTTPEndpoints:
    """Tests for the FastAPI app."""

    @pytest.fixture
    def client(self):
        """Test client over a fresh app."""
        return TestClient(create_app())

    @pytest.fixture
    def session_id(self, client):
        response = client.post("/api/v1/sessions", json={"rows": 6, "cols": 8, "player_count": 2})
        assert response.status_code == 200
        return response.json()["session_id"]

    def test_create_and_get(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}/state")

        assert response.status_code == 200
        data = response.json()
        assert data["current_player"] == 1
        assert data["move_count"] == 0
        assert data["accepting_moves"] is True
        assert data["board"][0][0] == {
            "row": 0, "col": 0, "count": 0, "owner": None, "capacity": 2,
        }

    def test_invalid_config_is_400(self, client):
        response = client.post("/api/v1/sessions", json={"rows": 1, "cols": 8})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CONFIG"

    def test_unknown_preset_is_400(self, client):
        response = client.post("/api/v1/sessions", json={"preset": "9x9"})
        assert response.status_code == 400

    def test_move_resolves_explosion(self, client, session_id):
        moves_url = f"/api/v1/sessions/{session_id}/moves"
        client.post(moves_url, json={"row": 0, "col": 0, "player": 1})
        client.post(moves_url, json={"row": 5, "col": 7, "player": 2})

        response = client.post(moves_url, json={"row": 0, "col": 0, "player": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["explosions"] == 1
        assert data["waves"] == [[[0, 0]]]
        assert data["ceiling_reached"] is False
        board = data["game_state"]["board"]
        assert board[0][0]["count"] == 0
        assert board[0][1]["owner"] == 1
        assert board[1][0]["owner"] == 1

    def test_ownership_violation_is_409(self, client, session_id):
        moves_url = f"/api/v1/sessions/{session_id}/moves"
        client.post(moves_url, json={"row": 2, "col": 2, "player": 1})

        response = client.post(moves_url, json={"row": 2, "col": 2, "player": 2})

        assert response.status_code == 409
        assert response.json()["error_code"] == "OWNERSHIP"
        state = client.get(f"/api/v1/sessions/{session_id}/state").json()
        assert state["board"][2][2]["owner"] == 1
        assert state["current_player"] == 2

    def test_out_of_turn_is_409(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/moves", json={"row": 0, "col": 0, "player": 2}
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "OUT_OF_TURN"

    def test_out_of_bounds_is_400(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/moves", json={"row": 6, "col": 0, "player": 1}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "OUT_OF_BOUNDS"

    def test_missing_session_is_404(self, client):
        response = client.post(
            "/api/v1/sessions/no-such-session/moves", json={"row": 0, "col": 0, "player": 1}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_restart(self, client, session_id):
        client.post(f"/api/v1/sessions/{session_id}/moves", json={"row": 0, "col": 0, "player": 1})

        response = client.post(f"/api/v1/sessions/{session_id}/restart")

        assert response.status_code == 200
        assert response.json()["move_count"] == 0
        assert response.json()["board"][0][0]["owner"] is None

    def test_new_setup(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/setup", json={"preset": "7x7", "player_count": 4}
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["rows"], data["cols"], data["player_count"]) == (7, 7, 4)
        assert data["session_id"] == session_id

    def test_legal_moves(self, client, session_id):
        response = client.get(f"/api/v1/sessions/{session_id}/legal-moves")

        assert response.status_code == 200
        assert len(response.json()["cells"]) == 48

    def test_end_session(self, client, session_id):
        response = client.delete(f"/api/v1/sessions/{session_id}")

        assert response.json() == {"success": True, "session_id": session_id}
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404

    def test_capacity(self, client):
        response = client.get("/api/v1/capacity", params={"rows": 6, "cols": 8, "row": 0, "col": 7})

        assert response.status_code == 200
        assert response.json()["capacity"] == 2

    def test_capacity_off_grid_is_400(self, client):
        response = client.get("/api/v1/capacity", params={"rows": 6, "cols": 8, "row": 6, "col": 0})

        assert response.status_code == 400
        assert response.json()["error_code"] == "OUT_OF_BOUNDS"

    def test_presets(self, client):
        data = client.get("/api/v1/presets").json()

        assert data["presets"]["6x8"] == [6, 8]
        assert data["default_preset"] == "6x8"
        assert (data["min_players"], data["max_players"]) == (2, 6)

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_openapi_schema(self, client):
        schema = client.get("/openapi.json").json()

        components = schema["components"]["schemas"]
        assert "MoveResponse" in components
        assert "GameStateResponse" in components
        assert "/api/v1/sessions/{session_id}/moves" in schema["paths"]

    def test_restart_while_resolving_is_409(self, client, session_id):
        manager = client.app.state.service.session_manager
        manager.get_session(session_id).resolving = True

        restart = client.post(f"/api/v1/sessions/{session_id}/restart")
        setup = client.post(f"/api/v1/sessions/{session_id}/setup", json={"preset": "7x7"})

        assert restart.status_code == 409
        assert restart.json()["error_code"] == "MOVE_IN_PROGRESS"
        assert setup.status_code == 409
        assert setup.json()["error_code"] == "MOVE_IN_PROGRESS"
