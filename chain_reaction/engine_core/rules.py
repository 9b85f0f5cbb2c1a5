"""
Rules - Move application, win evaluation and turn rotation.

Pure functions over Board and GameSession values. Validation of who
may move where lives in the reducer; the helpers here still refuse
moves that break the rules instead of quietly ignoring them.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import IllegalMoveError, RuleViolation
from .state import Board, GameSession


def apply_move(board: Board, row: int, col: int, player: int) -> Board:
    """
    Place one orb for player at (row, col).

    Returns a new board; the input board is untouched. Raises
    IllegalMoveError if the cell is off the grid or owned by someone
    else.
    """
    if not board.in_bounds(row, col):
        raise IllegalMoveError(
            f"({row}, {col}) is outside the {board.rows}x{board.cols} grid",
            RuleViolation.OUT_OF_BOUNDS,
        )
    cell = board.cell(row, col)
    if cell.owner is not None and cell.owner != player:
        raise IllegalMoveError(
            f"Cell ({row}, {col}) belongs to player {cell.owner}",
            RuleViolation.OWNERSHIP,
        )
    return board.with_cell(row, col, cell.add_orb(player))


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a board for a winner."""
    is_over: bool = False
    winner: int | None = None

    @classmethod
    def ongoing(cls) -> Outcome:
        return cls()

    @classmethod
    def won(cls, winner: int) -> Outcome:
        return cls(is_over=True, winner=winner)


def grace_period_over(move_count: int, player_count: int) -> bool:
    """No win can be declared before player_count + 1 moves."""
    return move_count >= player_count + 1


def evaluate(board: Board, move_count: int, player_count: int) -> Outcome:
    """
    Decide whether the game has ended.

    move_count includes the move just resolved. After the grace
    period, a board with exactly one player holding orbs is a win for
    that player. An empty board, or one shared by several players,
    keeps the game going; there are no draws.
    """
    if not grace_period_over(move_count, player_count):
        return Outcome.ongoing()

    owners = board.owners()
    if len(owners) == 1:
        return Outcome.won(next(iter(owners)))
    return Outcome.ongoing()


def next_player(session: GameSession) -> int:
    """
    Player who moves after the current one.

    Rotation is sequential with wrap-around. With skip_eliminated set,
    eliminated players are passed over; if everyone else is out the
    turn comes back to the current player.
    """
    count = session.config.player_count
    player = session.current_player
    for _ in range(count):
        player = (player % count) + 1
        if not session.config.skip_eliminated or not session.is_eliminated(player):
            return player
    return session.current_player
