"""
Player Progress - One record per (user, hunt).

The record is the only persisted play state. Every transition produces
a new record; nothing is mutated in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ProgressStatus(str, Enum):
    STARTED = "started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


ACTIVE_STATUSES = frozenset({ProgressStatus.STARTED, ProgressStatus.IN_PROGRESS})


@dataclass
class UserHuntProgress:
    """
    A player's position and accumulated state in one hunt.

    - current_node_id: None once the hunt ended on a null edge or was abandoned
    - story_state: flags set by choices and action triggers
    - completed_puzzle_ids: grows only; guards against double scoring
    - visited_path: bounded history used by "go back"
    - revealed_hints: "puzzle_id:index" keys already charged
    """
    user_id: str
    hunt_id: str
    current_node_id: str | None = None
    status: ProgressStatus = ProgressStatus.STARTED
    story_state: dict[str, Any] = field(default_factory=dict)
    completed_puzzle_ids: list[str] = field(default_factory=list)
    score: int = 0
    visited_path: list[str] = field(default_factory=list)
    revealed_hints: list[str] = field(default_factory=list)
    started_at: float | None = None
    last_played_at: float | None = None
    completed_at: float | None = None

    @classmethod
    def begin(cls, user_id: str, hunt_id: str, start_node_id: str, now: float | None = None) -> UserHuntProgress:
        """Fresh progress positioned on the starting node."""
        return cls(
            user_id=user_id,
            hunt_id=hunt_id,
            current_node_id=start_node_id,
            status=ProgressStatus.STARTED,
            visited_path=[start_node_id],
            started_at=now,
            last_played_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def key(self) -> tuple[str, str]:
        return (self.user_id, self.hunt_id)

    def has_completed(self, puzzle_id: str) -> bool:
        return puzzle_id in self.completed_puzzle_ids

    def _copy_with(self, **kwargs) -> UserHuntProgress:
        """Create a copy with some fields replaced."""
        return UserHuntProgress(
            user_id=kwargs.get("user_id", self.user_id),
            hunt_id=kwargs.get("hunt_id", self.hunt_id),
            current_node_id=kwargs.get("current_node_id", self.current_node_id),
            status=kwargs.get("status", self.status),
            story_state=kwargs.get("story_state", dict(self.story_state)),
            completed_puzzle_ids=kwargs.get("completed_puzzle_ids", list(self.completed_puzzle_ids)),
            score=kwargs.get("score", self.score),
            visited_path=kwargs.get("visited_path", list(self.visited_path)),
            revealed_hints=kwargs.get("revealed_hints", list(self.revealed_hints)),
            started_at=kwargs.get("started_at", self.started_at),
            last_played_at=kwargs.get("last_played_at", self.last_played_at),
            completed_at=kwargs.get("completed_at", self.completed_at),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "hunt_id": self.hunt_id,
            "current_node_id": self.current_node_id,
            "status": self.status.value,
            "story_state": dict(self.story_state),
            "completed_puzzle_ids": list(self.completed_puzzle_ids),
            "score": self.score,
            "visited_path": list(self.visited_path),
            "revealed_hints": list(self.revealed_hints),
            "started_at": self.started_at,
            "last_played_at": self.last_played_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserHuntProgress:
        return cls(
            user_id=data["user_id"],
            hunt_id=data["hunt_id"],
            current_node_id=data.get("current_node_id"),
            status=ProgressStatus(data.get("status", ProgressStatus.STARTED.value)),
            story_state=dict(data.get("story_state") or {}),
            completed_puzzle_ids=list(data.get("completed_puzzle_ids") or []),
            score=data.get("score", 0),
            visited_path=list(data.get("visited_path") or []),
            revealed_hints=list(data.get("revealed_hints") or []),
            started_at=data.get("started_at"),
            last_played_at=data.get("last_played_at"),
            completed_at=data.get("completed_at"),
        )
