"""
Session Module - Drives play against a store.

A session is one player's pass through one hunt. Its only state is the
persisted progress record, so a session can be dropped and resumed at
any time.
"""

from .player import HuntPlayer, PlayView

__all__ = [
    "HuntPlayer",
    "PlayView",
]
