"""
Chain Reaction - Turn-based orb placement engine

A deterministic rules engine for the Chain Reaction board game.
Players place orbs on a grid; full cells explode into their neighbors
and capture them. The package provides:
- Immutable board and session values
- Move validation and application
- Batched chain-reaction resolution
- Win detection and turn rotation
- An in-memory session manager and a REST API for a front end
"""

__version__ = "0.1.0"
