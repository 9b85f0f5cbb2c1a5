"""
Move Generator - Lists the legal moves in a game session.

Used by:
1. Front ends to highlight the cells a player may click
2. Callers that only need a yes/no check (is_legal)
3. Tests that walk a game forward
"""

from __future__ import annotations

from .action import Move
from .state import GameSession


def legal_moves(session: GameSession) -> list[Move]:
    """
    Every placement the current player may make, in row-major order.

    A player may place on empty cells and on cells they already own.
    No moves are legal once the game is over.
    """
    if session.is_terminal:
        return []

    player = session.current_player
    board = session.board
    return [
        Move(row=row, col=col, player=player)
        for row, col in board.coords()
        if board.cells[board.index(row, col)].owner in (None, player)
    ]


def is_legal(session: GameSession, move: Move) -> bool:
    """Check if a single move is legal without building the full list."""
    if session.is_terminal or move.player != session.current_player:
        return False
    if not session.board.in_bounds(move.row, move.col):
        return False
    return session.board.cell(move.row, move.col).owner in (None, move.player)
