"""
Pytest fixtures for Chain Reaction tests.
"""

import pytest

from ..engine_core.state import Board, GameConfig, GameSession
from ..engine_core.reducer import create_game

# Empty cell as a (count, owner) pair
E = (0, None)


def make_session(grid, player_count=2, current_player=1, move_count=0,
                 moved_players=None, skip_eliminated=False) -> GameSession:
    """Build a mid-game session from nested (count, owner) pairs."""
    board = Board.from_rows(grid)
    game_config = GameConfig(
        rows=board.rows,
        cols=board.cols,
        player_count=player_count,
        skip_eliminated=skip_eliminated,
    )
    if moved_players is None:
        moved_players = board.owners()
    return GameSession(
        config=game_config,
        board=board,
        current_player=current_player,
        move_count=move_count,
        moved_players=frozenset(moved_players),
    )


@pytest.fixture
def session_factory():
    """Factory for mid-game sessions, see make_session()."""
    return make_session


@pytest.fixture
def standard_game() -> GameSession:
    """Fresh 6x8 two-player game."""
    return create_game(6, 8, 2)


@pytest.fixture
def three_player_game() -> GameSession:
    """Fresh 7x7 three-player game."""
    return create_game(7, 7, 3)


@pytest.fixture
def cascade_board() -> Board:
    """
    3x3 board where the corner explodes and sets off its edge neighbor.

    (0,0) holds 2 for player 1 (capacity 2), (0,1) holds 2 for
    player 2 (capacity 3).
    """
    return Board.from_rows([
        [(2, 1), (2, 2), E],
        [E, E, E],
        [E, E, E],
    ])
