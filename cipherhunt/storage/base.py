"""
Hunt Store - The persistence collaborator.

The engine only needs a small CRUD surface. Identifiers are assigned by
the store on insert. Progress is upserted on (user_id, hunt_id) so a
retried write never creates a second record.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from ..play.progress import UserHuntProgress
    from ..story_graph.content import NodeContent
    from ..story_graph.nodes import Choice, StoryNode
    from ..story_graph.puzzle import Puzzle


@dataclass
class Hunt:
    """A published (or publishing) hunt."""
    title: str
    hunt_id: str | None = None
    description: str = ""
    difficulty: str = "medium"
    is_public: bool = False
    creator_id: str | None = None
    starting_node_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hunt_id": self.hunt_id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "is_public": self.is_public,
            "creator_id": self.creator_id,
            "starting_node_id": self.starting_node_id,
            "metadata": dict(self.metadata),
        }


class HuntStore(ABC):
    """
    Abstract persistence interface.

    Getters return None for unknown ids. Writers raise LookupError when
    the record they update does not exist.
    """

    @abstractmethod
    def get_progress(self, user_id: str, hunt_id: str) -> UserHuntProgress | None:
        pass

    @abstractmethod
    def upsert_progress(
        self,
        progress: UserHuntProgress,
        fields: Iterable[str] | None = None,
    ) -> UserHuntProgress:
        """
        Insert or update progress keyed by (user_id, hunt_id).

        With `fields`, only those fields are written and the rest of an
        existing record is preserved.
        """
        pass

    @abstractmethod
    def get_node(self, node_id: str) -> StoryNode | None:
        pass

    @abstractmethod
    def get_puzzle(self, puzzle_id: str) -> Puzzle | None:
        pass

    @abstractmethod
    def list_nodes(self, hunt_id: str) -> list[StoryNode]:
        """All nodes of a hunt in display order."""
        pass

    @abstractmethod
    def list_puzzles(self, hunt_id: str) -> list[Puzzle]:
        """All puzzles of a hunt."""
        pass

    @abstractmethod
    def insert_node(self, node: StoryNode) -> StoryNode:
        """Persist a node under a new id and return the stored copy."""
        pass

    @abstractmethod
    def insert_puzzle(self, puzzle: Puzzle) -> Puzzle:
        """Persist a puzzle under a new id and return the stored copy."""
        pass

    @abstractmethod
    def update_node_content(
        self,
        node_id: str,
        content: NodeContent,
        choices: list[Choice] | None = None,
    ) -> StoryNode:
        """Replace a node's content, and its choices when given."""
        pass

    @abstractmethod
    def set_hunt_starting_node(self, hunt_id: str, node_id: str) -> Hunt:
        pass

    @abstractmethod
    def create_hunt(self, hunt: Hunt) -> Hunt:
        """Persist a hunt record under a new id and return it."""
        pass

    @abstractmethod
    def get_hunt(self, hunt_id: str) -> Hunt | None:
        pass
