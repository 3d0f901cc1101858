"""
Error taxonomy shared by every layer.

Authoring problems are reported before publish and never silently
repaired. Play problems leave the last persisted progress untouched so a
session can always be resumed.
"""

from __future__ import annotations


class CipherHuntError(Exception):
    """Base class for all engine errors."""


class CipherConfigError(CipherHuntError, ValueError):
    """Raised when a cipher configuration is invalid (shift, key, columns)."""


class CipherInputError(CipherHuntError, ValueError):
    """Raised when text is outside a codec's encode or decode domain."""


class AuthoringValidationError(CipherHuntError):
    """Raised when a draft hunt violates graph invariants."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Hunt validation failed with {len(errors)} error(s): " + "; ".join(errors))


class PublishError(CipherHuntError):
    """
    Raised when reference resolution fails part-way through publish.

    The hunt is partially published. `id_map` and `pending` let the
    caller re-run the resolution pass, which is idempotent.
    """

    def __init__(
        self,
        message: str,
        hunt_id: str,
        id_map: dict[str, str],
        pending: list[str],
    ):
        self.hunt_id = hunt_id
        self.id_map = id_map
        self.pending = pending
        super().__init__(message)


class PlayIntegrityError(CipherHuntError):
    """Raised when progress points at a node or puzzle that no longer resolves."""

    def __init__(self, message: str, node_id: str | None = None, puzzle_id: str | None = None):
        self.node_id = node_id
        self.puzzle_id = puzzle_id
        super().__init__(message)


class ProgressNotFoundError(CipherHuntError, LookupError):
    """Raised when acting on a hunt the user has not started."""


class HuntNotFoundError(CipherHuntError, LookupError):
    """Raised when a hunt id does not resolve to a published hunt."""
