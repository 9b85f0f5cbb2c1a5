"""
Reducer - Applies moves to game sessions.

The reducer is the single point of state transition.
All session changes must go through submit_move().

Design principles:
- Pure function: (session, move) -> new session
- Validates before applying
- Returns MoveResult with success/failure
- Delegates chain reactions to the resolver
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..config import MAX_RESOLUTION_PASSES
from .action import IllegalMoveError, Move, MoveResult, RuleViolation
from .geometry import capacity, in_bounds
from .resolver import resolve
from .rules import apply_move, evaluate, next_player
from .state import Board, GameConfig, GamePhase, GameSession

logger = logging.getLogger(__name__)


def create_game(
    rows: int,
    cols: int,
    player_count: int,
    skip_eliminated: bool = False,
) -> GameSession:
    """
    Start a new game.

    Empty board, player 1 to move, no moves made. Raises ValueError
    for grids smaller than 2x2 or player counts outside 2-6.
    """
    game_config = GameConfig(
        rows=rows,
        cols=cols,
        player_count=player_count,
        skip_eliminated=skip_eliminated,
    )
    return new_session(game_config)


def new_session(game_config: GameConfig) -> GameSession:
    """Fresh session for an existing config."""
    return GameSession(
        config=game_config,
        board=Board.empty(game_config.rows, game_config.cols),
    )


def get_cell_capacity(rows: int, cols: int, row: int, col: int) -> int:
    """Explosion threshold of a cell, for capacity indicators."""
    if not in_bounds(row, col, rows, cols):
        raise IllegalMoveError(
            f"({row}, {col}) is outside a {rows}x{cols} grid",
            RuleViolation.OUT_OF_BOUNDS,
        )
    return capacity(row, col, rows, cols)


@dataclass
class Reducer:
    """
    Reducer applies moves to game sessions.

    Stateless - all game state is in GameSession.
    max_passes bounds chain-reaction resolution per move.
    """
    max_passes: int = MAX_RESOLUTION_PASSES

    def apply(self, session: GameSession, move: Move) -> MoveResult:
        """
        Apply a move to the session.

        Returns MoveResult with the new session or the violation.
        """
        violation = self._validate_move(session, move)
        if violation:
            logger.debug("Rejected %s: %s", move, violation[1])
            return MoveResult.failure(violation[1], violation[0])

        try:
            board = apply_move(session.board, move.row, move.col, move.player)
        except IllegalMoveError as e:
            return MoveResult.failure(str(e), e.violation)

        resolution = resolve(board, max_passes=self.max_passes)
        move_count = session.move_count + 1
        outcome = evaluate(resolution.board, move_count, session.player_count)

        updated = session._copy_with(
            board=resolution.board,
            move_count=move_count,
            explosion_count=resolution.explosions,
            history=session.history + (move,),
            moved_players=session.moved_players | {move.player},
        )

        changes = [f"Player {move.player} placed an orb at ({move.row}, {move.col})"]
        if resolution.explosions:
            changes.append(
                f"{resolution.explosions} explosion(s) over {resolution.passes} wave(s)"
            )
        if resolution.ceiling_reached:
            changes.append("Chain reaction stopped at the pass limit")

        if outcome.is_over:
            updated = updated._copy_with(
                phase=GamePhase.GAME_OVER,
                winner=outcome.winner,
            )
            changes.append(f"Game over. Player {outcome.winner} wins")
            logger.info(
                "Player %d won after %d moves", outcome.winner, move_count
            )
        else:
            following = next_player(updated)
            updated = updated._copy_with(current_player=following)
            changes.append(f"Next player: {following}")

        return MoveResult.success_with_session(updated, resolution, changes)

    def _validate_move(
        self, session: GameSession, move: Move
    ) -> tuple[RuleViolation, str] | None:
        """
        Check that a move is legal in the current session.

        Returns (violation, message) if invalid, None if valid.
        """
        if session.is_terminal:
            return (
                RuleViolation.GAME_ALREADY_OVER,
                f"Game is over - player {session.winner} already won",
            )

        if move.player != session.current_player:
            return (
                RuleViolation.OUT_OF_TURN,
                f"Not player {move.player}'s turn (player {session.current_player} to move)",
            )

        if not session.board.in_bounds(move.row, move.col):
            return (
                RuleViolation.OUT_OF_BOUNDS,
                f"({move.row}, {move.col}) is outside the "
                f"{session.board.rows}x{session.board.cols} grid",
            )

        owner = session.board.cell(move.row, move.col).owner
        if owner is not None and owner != move.player:
            return (
                RuleViolation.OWNERSHIP,
                f"Cell ({move.row}, {move.col}) belongs to player {owner}",
            )

        return None


def submit_move(session: GameSession, row: int, col: int, player: int) -> MoveResult:
    """
    Convenience function to submit a move.

    Creates a Reducer and applies the move.
    """
    reducer = Reducer()
    return reducer.apply(session, Move(row=row, col=col, player=player))


def replay(game_config: GameConfig, moves: list[Move]) -> GameSession:
    """
    Rebuild a session by replaying moves from a fresh game.

    Raises ValueError at the first move the rules reject.
    """
    reducer = Reducer()
    session = new_session(game_config)
    for i, move in enumerate(moves):
        result = reducer.apply(session, move)
        if not result.success:
            raise ValueError(f"Move {i} ({move.to_dict()}) rejected: {result.error}")
        session = result.session
    return session
