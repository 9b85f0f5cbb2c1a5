"""
Game State - Board, cells and the game session value.

Design principles:
- Immutable: every change returns a new value
- Copy-on-write: boards share nothing mutable with their successors
- Serializable: plain ints and tuples, easy to turn into JSON
- Self-validating: configs reject impossible grids up front
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator

from ..config import (
    DEFAULT_COLS, DEFAULT_PLAYERS, DEFAULT_ROWS, GRID_PRESETS,
    MAX_PLAYERS, MIN_GRID_SIZE, MIN_PLAYERS,
)
from .geometry import Coord, in_bounds


class GamePhase(Enum):
    """High-level game phases."""
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Cell:
    """
    A single grid cell.

    An unowned cell always has count 0, an owned cell always has
    count >= 1.
    """
    count: int = 0
    owner: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.owner is None

    def add_orb(self, player: int) -> Cell:
        """Return new cell with one more orb, owned by player."""
        return Cell(count=self.count + 1, owner=player)


EMPTY_CELL = Cell()


@dataclass(frozen=True)
class Board:
    """
    Full grid of cells, stored row-major.

    Boards are values: with_cell() and friends return a new Board
    and never touch the receiver.
    """
    rows: int
    cols: int
    cells: tuple[Cell, ...]

    @classmethod
    def empty(cls, rows: int, cols: int) -> Board:
        """Create a board with every cell unowned."""
        return cls(rows=rows, cols=cols, cells=(EMPTY_CELL,) * (rows * cols))

    @classmethod
    def from_rows(cls, grid: list[list[tuple[int, int | None]]]) -> Board:
        """
        Build a board from nested (count, owner) pairs.

        Handy for tests and for restoring a board sent by a client.
        """
        rows = len(grid)
        cols = len(grid[0]) if rows else 0
        cells = []
        for line in grid:
            if len(line) != cols:
                raise ValueError("All rows must have the same length")
            for count, owner in line:
                if (count == 0) != (owner is None):
                    raise ValueError(
                        f"Cell ({count}, {owner}) breaks the ownership invariant"
                    )
                cells.append(Cell(count=count, owner=owner))
        return cls(rows=rows, cols=cols, cells=tuple(cells))

    def index(self, row: int, col: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return row * self.cols + col

    def in_bounds(self, row: int, col: int) -> bool:
        return in_bounds(row, col, self.rows, self.cols)

    def cell(self, row: int, col: int) -> Cell:
        """Get the cell at (row, col)."""
        if not self.in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside a {self.rows}x{self.cols} grid")
        return self.cells[self.index(row, col)]

    def with_cell(self, row: int, col: int, cell: Cell) -> Board:
        """Return new board with one cell replaced."""
        cells = list(self.cells)
        cells[self.index(row, col)] = cell
        return Board(rows=self.rows, cols=self.cols, cells=tuple(cells))

    def coords(self) -> Iterator[Coord]:
        """Iterates over all coordinates in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def owners(self) -> set[int]:
        """Distinct players holding at least one orb."""
        return {cell.owner for cell in self.cells if cell.owner is not None and cell.count > 0}

    def cell_counts(self) -> dict[int, int]:
        """Number of cells owned per player."""
        return dict(Counter(cell.owner for cell in self.cells if cell.owner is not None))

    def orb_counts(self) -> dict[int, int]:
        """Number of orbs held per player."""
        totals: Counter[int] = Counter()
        for cell in self.cells:
            if cell.owner is not None:
                totals[cell.owner] += cell.count
        return dict(totals)

    def total_orbs(self) -> int:
        return sum(cell.count for cell in self.cells)

    def to_rows(self) -> list[list[tuple[int, int | None]]]:
        """Nested (count, owner) pairs, the inverse of from_rows()."""
        return [
            [(cell.count, cell.owner) for cell in self.cells[r * self.cols:(r + 1) * self.cols]]
            for r in range(self.rows)
        ]

    def pretty(self) -> str:
        """
        Human-readable diagram of the board.

        Empty cells print as '.', owned cells as '<count>p<player>'.
        """
        lines: list[str] = []
        for r in range(self.rows):
            row: list[str] = []
            for c in range(self.cols):
                cell = self.cells[self.index(r, c)]
                row.append(" . " if cell.is_empty else f"{cell.count}p{cell.owner}")
            lines.append(" ".join(row))
        return "\n".join(lines)


@dataclass(frozen=True)
class GameConfig:
    """
    Per-game settings, fixed once the game is created.

    skip_eliminated: when True, players who have moved and lost every
    cell are skipped in turn rotation. Off by default, which keeps
    giving them turns.
    """
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    player_count: int = DEFAULT_PLAYERS
    skip_eliminated: bool = False

    def __post_init__(self):
        if self.rows < MIN_GRID_SIZE or self.cols < MIN_GRID_SIZE:
            raise ValueError(
                f"Grid must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}, "
                f"got {self.rows}x{self.cols}"
            )
        if not MIN_PLAYERS <= self.player_count <= MAX_PLAYERS:
            raise ValueError(
                f"player_count must be between {MIN_PLAYERS} and "
                f"{MAX_PLAYERS}, got {self.player_count}"
            )

    @classmethod
    def from_preset(cls, preset: str, player_count: int = DEFAULT_PLAYERS,
                    skip_eliminated: bool = False) -> GameConfig:
        """Build a config from a named grid preset such as '7x7'."""
        if preset not in GRID_PRESETS:
            raise ValueError(f"Unknown grid preset: {preset}")
        rows, cols = GRID_PRESETS[preset]
        return cls(rows=rows, cols=cols, player_count=player_count,
                   skip_eliminated=skip_eliminated)


@dataclass(frozen=True)
class GameSession:
    """
    Complete game state at a point in time.

    This is the value the reducer consumes and produces. Callers hold
    on to it and replace it with the session returned by submit_move();
    they never modify it.
    """
    config: GameConfig
    board: Board
    current_player: int = 1
    move_count: int = 0
    phase: GamePhase = GamePhase.PLAYING
    winner: int | None = None

    # Explosions caused by the most recent move
    explosion_count: int = 0

    # Accepted moves in order, for replay
    history: tuple = field(default_factory=tuple)

    # Players who have placed at least one orb
    moved_players: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_terminal(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def player_count(self) -> int:
        return self.config.player_count

    @property
    def players(self) -> list[int]:
        return list(range(1, self.config.player_count + 1))

    def is_eliminated(self, player: int) -> bool:
        """
        A player is eliminated once they have moved and own no cells.

        Players who have not placed yet are never eliminated.
        """
        if player not in self.moved_players:
            return False
        return self.board.cell_counts().get(player, 0) == 0

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)
