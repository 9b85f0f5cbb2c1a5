"""
Move System - Moves, rule violations and results.

A move is one orb placement by one player. All session changes
flow through moves; rejected moves come back as failed results
carrying a RuleViolation and leave the session untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .geometry import Coord


class RuleViolation(str, Enum):
    """
    Reasons a move can be rejected.

    Values double as machine-readable error codes on the wire.
    """
    OUT_OF_TURN = "OUT_OF_TURN"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    OWNERSHIP = "OWNERSHIP"
    GAME_ALREADY_OVER = "GAME_ALREADY_OVER"

    # Raised by the session manager, not the reducer
    MOVE_IN_PROGRESS = "MOVE_IN_PROGRESS"


class IllegalMoveError(ValueError):
    """Raised when an engine helper is called with a move the rules forbid."""

    def __init__(self, message: str, violation: RuleViolation):
        super().__init__(message)
        self.violation = violation


@dataclass(frozen=True)
class Move:
    """A single orb placement."""
    row: int
    col: int
    player: int

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "col": self.col, "player": self.player}


@dataclass
class MoveResult:
    """
    Result of submitting a move.

    Contains:
    - Whether the move was accepted
    - New session (if accepted)
    - Violation and message (if rejected)
    - Resolution details for presentation pacing
    """
    success: bool
    session: Any | None = None  # GameSession
    violation: RuleViolation | None = None
    error: str | None = None

    # Chain reaction details
    explosions: int = 0
    waves: tuple[tuple[Coord, ...], ...] = ()
    ceiling_reached: bool = False

    # Human-readable changes
    changes: list[str] = field(default_factory=list)

    @property
    def error_code(self) -> str | None:
        return self.violation.value if self.violation else None

    @classmethod
    def failure(cls, error: str, violation: RuleViolation) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, violation=violation)

    @classmethod
    def success_with_session(
        cls,
        session: Any,
        resolution: Any,
        changes: list[str] | None = None,
    ) -> MoveResult:
        """Create a success result from the new session and its Resolution."""
        return cls(
            success=True,
            session=session,
            explosions=resolution.explosions,
            waves=resolution.waves,
            ceiling_reached=resolution.ceiling_reached,
            changes=changes or [],
        )
