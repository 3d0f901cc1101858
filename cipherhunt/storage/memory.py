"""
In-memory Hunt Store.

Everything lives in dicts and every read or write goes through a deep
copy, so callers can never mutate stored records by accident.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import replace
from typing import Iterable
import logging
import uuid

from ..play.progress import UserHuntProgress
from ..story_graph.content import NodeContent
from ..story_graph.nodes import Choice, StoryNode
from ..story_graph.puzzle import Puzzle
from .base import Hunt, HuntStore

logger = logging.getLogger(__name__)


class InMemoryHuntStore(HuntStore):
    """Dict-backed store for tests and single-process servers."""

    def __init__(self):
        self._hunts: dict[str, Hunt] = {}
        self._nodes: dict[str, StoryNode] = {}
        self._puzzles: dict[str, Puzzle] = {}
        self._progress: dict[tuple[str, str], UserHuntProgress] = {}

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    def get_progress(self, user_id: str, hunt_id: str) -> UserHuntProgress | None:
        progress = self._progress.get((user_id, hunt_id))
        return deepcopy(progress) if progress else None

    def upsert_progress(
        self,
        progress: UserHuntProgress,
        fields: Iterable[str] | None = None,
    ) -> UserHuntProgress:
        existing = self._progress.get(progress.key)
        if existing is not None and fields is not None:
            updates = {name: deepcopy(getattr(progress, name)) for name in fields}
            stored = replace(existing, **updates)
        else:
            stored = deepcopy(progress)
        self._progress[progress.key] = stored
        return deepcopy(stored)

    def get_node(self, node_id: str) -> StoryNode | None:
        node = self._nodes.get(node_id)
        return deepcopy(node) if node else None

    def get_puzzle(self, puzzle_id: str) -> Puzzle | None:
        puzzle = self._puzzles.get(puzzle_id)
        return deepcopy(puzzle) if puzzle else None

    def list_nodes(self, hunt_id: str) -> list[StoryNode]:
        nodes = [node for node in self._nodes.values() if node.hunt_id == hunt_id]
        return [deepcopy(node) for node in sorted(nodes, key=lambda n: n.display_order)]

    def list_puzzles(self, hunt_id: str) -> list[Puzzle]:
        return [deepcopy(p) for p in self._puzzles.values() if p.hunt_id == hunt_id]

    def insert_node(self, node: StoryNode) -> StoryNode:
        stored = deepcopy(node)
        stored.node_id = self._new_id()
        self._nodes[stored.node_id] = stored
        return deepcopy(stored)

    def insert_puzzle(self, puzzle: Puzzle) -> Puzzle:
        stored = deepcopy(puzzle)
        stored.puzzle_id = self._new_id()
        self._puzzles[stored.puzzle_id] = stored
        return deepcopy(stored)

    def update_node_content(
        self,
        node_id: str,
        content: NodeContent,
        choices: list[Choice] | None = None,
    ) -> StoryNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise LookupError(f"Node {node_id} not found")
        node.content = deepcopy(content)
        if choices is not None:
            node.choices = deepcopy(choices)
        return deepcopy(node)

    def set_hunt_starting_node(self, hunt_id: str, node_id: str) -> Hunt:
        hunt = self._hunts.get(hunt_id)
        if hunt is None:
            raise LookupError(f"Hunt {hunt_id} not found")
        hunt.starting_node_id = node_id
        return deepcopy(hunt)

    def create_hunt(self, hunt: Hunt) -> Hunt:
        stored = deepcopy(hunt)
        stored.hunt_id = self._new_id()
        self._hunts[stored.hunt_id] = stored
        logger.debug("Created hunt %s (%s)", stored.hunt_id, stored.title)
        return deepcopy(stored)

    def get_hunt(self, hunt_id: str) -> Hunt | None:
        hunt = self._hunts.get(hunt_id)
        return deepcopy(hunt) if hunt else None
