"""
Configuration - Game constants and environment settings.

Game constants are fixed by the rules. Environment settings control
the API process and can be overridden per deployment.
"""

import os

# Grid presets offered to players (rows, cols)
GRID_PRESETS: dict[str, tuple[int, int]] = {
    "6x8": (6, 8),
    "7x7": (7, 7),
    "8x6": (8, 6),
}
DEFAULT_PRESET = "6x8"
DEFAULT_ROWS, DEFAULT_COLS = GRID_PRESETS[DEFAULT_PRESET]

MIN_GRID_SIZE = 2
MIN_PLAYERS = 2
MAX_PLAYERS = 6
DEFAULT_PLAYERS = 2

# Upper bound on explode passes per move
MAX_RESOLUTION_PASSES = 100

# Environment configuration
CHAIN_REACTION_ENV = os.getenv("CHAIN_REACTION_ENV", "development")
CHAIN_REACTION_LOG_LEVEL = os.getenv("CHAIN_REACTION_LOG_LEVEL", "INFO").upper()
SESSION_TTL_SECONDS = int(os.getenv("CHAIN_REACTION_SESSION_TTL", "3600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
