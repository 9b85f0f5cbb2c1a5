"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a game:
- Created when a front end starts a game
- Holds the current GameSession value
- Routes moves through the reducer
- Destroyed when the front end ends it or it goes stale

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
