"""Storage - the persistence collaborator interface and an in-memory store."""

from .base import HuntStore, Hunt
from .memory import InMemoryHuntStore

__all__ = [
    "HuntStore",
    "Hunt",
    "InMemoryHuntStore",
]
