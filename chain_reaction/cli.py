"""
Chain Reaction CLI - Command-line interface for the engine.

Usage:
    chain-reaction capacity [--rows R --cols C | --preset 6x8]   Print the capacity grid
    chain-reaction play [--players N] [--preset 7x7]             Play in the terminal
    chain-reaction serve [--host H] [--port P]                   Run the REST API
"""

import argparse
import logging
import sys

from .config import (
    CHAIN_REACTION_LOG_LEVEL, DEFAULT_PLAYERS, DEFAULT_PRESET, GRID_PRESETS,
)

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Chain Reaction - turn-based orb placement game",
        prog="chain-reaction",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Capacity command
    capacity_parser = subparsers.add_parser("capacity", help="Print the capacity of every cell")
    _add_grid_arguments(capacity_parser)

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    _add_grid_arguments(play_parser)
    play_parser.add_argument("--players", type=int, default=DEFAULT_PLAYERS, help="Number of players")
    play_parser.add_argument(
        "--skip-eliminated", action="store_true",
        help="Skip players who have lost all their cells",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else CHAIN_REACTION_LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "capacity":
        cmd_capacity(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def _add_grid_arguments(parser):
    parser.add_argument("--preset", choices=sorted(GRID_PRESETS), help="Grid preset")
    parser.add_argument("--rows", type=int, help="Grid rows")
    parser.add_argument("--cols", type=int, help="Grid columns")


def _grid_size(args):
    if args.preset:
        return GRID_PRESETS[args.preset]
    rows, cols = GRID_PRESETS[DEFAULT_PRESET]
    return args.rows or rows, args.cols or cols


def cmd_capacity(args):
    """Print the capacity grid."""
    from .engine_core.geometry import capacity
    from .engine_core.state import GameConfig

    rows, cols = _grid_size(args)
    try:
        GameConfig(rows=rows, cols=cols)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for r in range(rows):
        print(" ".join(str(capacity(r, c, rows, cols)) for c in range(cols)))


def cmd_play(args):
    """Play a game in the terminal, one 'row col' per turn."""
    from .engine_core.reducer import create_game, submit_move

    rows, cols = _grid_size(args)
    try:
        session = create_game(rows, cols, args.players, skip_eliminated=args.skip_eliminated)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Game started with {args.players} players on a {rows}x{cols} grid!")
    print("Enter 'row col' to place an orb, 'q' to quit.\n")

    while not session.is_terminal:
        print(session.board.pretty())
        try:
            line = input(f"\nPlayer {session.current_player}> ").strip()
        except EOFError:
            print()
            return
        if line.lower() in {"q", "quit", "exit"}:
            return

        parts = line.split()
        if len(parts) != 2 or not all(p.lstrip("-").isdigit() for p in parts):
            print("Expected two numbers: row col")
            continue

        result = submit_move(session, int(parts[0]), int(parts[1]), session.current_player)
        if not result.success:
            print(f"Rejected ({result.error_code}): {result.error}")
            continue

        session = result.session
        for change in result.changes:
            print(f"  - {change}")

    print(session.board.pretty())
    print(f"\nGame Over! Player {session.winner} wins after {session.move_count} moves!")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    logger.info("Serving on %s:%d", args.host, args.port)
    uvicorn.run("chain_reaction.api.app:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
