"""
Grid geometry - Capacity and adjacency for rectangular grids.

Capacity is never stored on a cell. It is derived from the cell's
position: the number of orthogonal neighbors inside the grid.
"""

from __future__ import annotations

Coord = tuple[int, int]

# up, down, left, right
_DIRECTIONS: tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def capacity(row: int, col: int, rows: int, cols: int) -> int:
    """
    Orb count at which the cell at (row, col) explodes.

    Corners hold 2, edges 3, interior cells 4.
    """
    limit = 4
    if row == 0:
        limit -= 1
    if row == rows - 1:
        limit -= 1
    if col == 0:
        limit -= 1
    if col == cols - 1:
        limit -= 1
    return limit


def neighbors(row: int, col: int, rows: int, cols: int) -> tuple[Coord, ...]:
    """In-bounds orthogonal neighbors, ordered up, down, left, right."""
    result = []
    for dr, dc in _DIRECTIONS:
        r, c = row + dr, col + dc
        if 0 <= r < rows and 0 <= c < cols:
            result.append((r, c))
    return tuple(result)


def in_bounds(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 <= row < rows and 0 <= col < cols
