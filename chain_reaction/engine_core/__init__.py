"""
Engine Core - Deterministic game state and chain-reaction resolution.

The engine is the runtime that:
1. Creates a GameSession from a GameConfig
2. Validates moves
3. Applies a move to the board
4. Resolves chain reactions to a stable board
5. Evaluates the win condition and rotates turns
"""

from .geometry import capacity, neighbors
from .state import Board, Cell, GameConfig, GamePhase, GameSession
from .action import IllegalMoveError, Move, MoveResult, RuleViolation
from .resolver import Resolution, resolve
from .rules import Outcome, apply_move, evaluate, next_player
from .reducer import Reducer, create_game, get_cell_capacity, new_session, replay, submit_move
from .move_generator import is_legal, legal_moves

__all__ = [
    "capacity",
    "neighbors",
    "Board",
    "Cell",
    "GameConfig",
    "GamePhase",
    "GameSession",
    "IllegalMoveError",
    "Move",
    "MoveResult",
    "RuleViolation",
    "Resolution",
    "resolve",
    "Outcome",
    "apply_move",
    "evaluate",
    "next_player",
    "Reducer",
    "create_game",
    "get_cell_capacity",
    "new_session",
    "replay",
    "submit_move",
    "is_legal",
    "legal_moves",
]
