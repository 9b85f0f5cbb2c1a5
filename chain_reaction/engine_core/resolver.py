"""
Chain Reaction Resolver - Runs explosions until the board is stable.

Resolution is batched, not recursive. Each pass:
1. Scans every cell in row-major order and collects the owned
   cells at or above capacity, tagged with their owner.
2. Explodes all collected cells together: each resets to empty and
   sends one orb to every neighbor, which switches to the
   exploder's owner.

Passes repeat until a scan finds nothing or the pass ceiling is hit.
When several cells explode into the same neighbor in one pass, every
orb lands and the last exploder in scan order owns the result.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..config import MAX_RESOLUTION_PASSES
from .geometry import Coord, capacity, neighbors
from .state import Board, Cell, EMPTY_CELL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving a board.

    waves holds, per pass, the coordinates that exploded together.
    ceiling_reached is set when the pass limit stopped resolution
    while cells were still over capacity.
    """
    board: Board
    explosions: int = 0
    passes: int = 0
    waves: tuple[tuple[Coord, ...], ...] = ()
    ceiling_reached: bool = False

    @property
    def is_stable(self) -> bool:
        return not self.ceiling_reached


def unstable_cells(board: Board) -> list[tuple[Coord, int]]:
    """Owned cells at or above capacity, row-major, with their owner."""
    found = []
    for row, col in board.coords():
        cell = board.cells[board.index(row, col)]
        if cell.owner is not None and cell.count >= capacity(row, col, board.rows, board.cols):
            found.append(((row, col), cell.owner))
    return found


def explode(board: Board, pending: list[tuple[Coord, int]]) -> Board:
    """
    Explode every pending cell at once and return the new board.

    Works on a private copy of the cell list; the input board is
    not modified.
    """
    cells: list[Cell] = list(board.cells)
    for (row, col), owner in pending:
        cells[board.index(row, col)] = EMPTY_CELL
        for r, c in neighbors(row, col, board.rows, board.cols):
            idx = board.index(r, c)
            cells[idx] = Cell(count=cells[idx].count + 1, owner=owner)
    return Board(rows=board.rows, cols=board.cols, cells=tuple(cells))


def resolve(board: Board, max_passes: int = MAX_RESOLUTION_PASSES) -> Resolution:
    """
    Resolve all chain reactions on the board.

    Returns a Resolution with the stable board. If max_passes runs out
    first, the board is returned as it stands with ceiling_reached set.
    """
    explosions = 0
    passes = 0
    waves: list[tuple[Coord, ...]] = []

    pending = unstable_cells(board)
    while pending and passes < max_passes:
        board = explode(board, pending)
        explosions += len(pending)
        waves.append(tuple(coord for coord, _ in pending))
        passes += 1
        pending = unstable_cells(board)

    ceiling_reached = bool(pending)
    if ceiling_reached:
        logger.warning(
            "Chain reaction stopped after %d passes with %d cells still over capacity",
            passes, len(pending),
        )
    elif explosions:
        logger.debug("Resolved %d explosions in %d passes", explosions, passes)

    return Resolution(
        board=board,
        explosions=explosions,
        passes=passes,
        waves=tuple(waves),
        ceiling_reached=ceiling_reached,
    )
