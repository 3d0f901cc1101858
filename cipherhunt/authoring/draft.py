"""
Draft Graph - In-memory authoring of a hunt.

Nodes and puzzles are keyed by local ids ("local-node-3") that only mean
something inside the draft. The publisher swaps them for store-assigned
ids. Edits never repair the graph: a dangling reference left behind by
a delete is reported when the draft is validated.
"""

from __future__ import annotations
from typing import Any, Iterable
import itertools
import logging

from ..ciphers.anagram import verify_anagram
from ..ciphers.base import CipherConfig, CipherKind
from ..ciphers.registry import get_codec
from ..errors import AuthoringValidationError
from ..storage.base import Hunt
from ..story_graph.content import NodeContent, NodeKind, parse_content
from ..story_graph.nodes import Choice, StoryNode, node_references
from ..story_graph.puzzle import MAX_HINTS, Hint, Puzzle
from ..story_graph.validation import ValidationResult, validate_graph

logger = logging.getLogger(__name__)

LOCAL_ID_PREFIX = "local-"


class DraftGraph:
    """
    A hunt under construction.

    Usage:
        draft = DraftGraph(title="The Lost Key")
        clue = draft.add_puzzle(CipherKind.CAESAR, "HELLO WORLD", points=10)
        end = draft.add_node(NodeKind.END, {"message": "Done", "outcome": "success"})
        gate = draft.add_node(NodeKind.PUZZLE_GATE, {"puzzle_id": clue.puzzle_id, "success": end.node_id})
        draft.set_starting_node(gate.node_id)
    """

    def __init__(
        self,
        title: str,
        description: str = "",
        difficulty: str = "medium",
        is_public: bool = False,
        creator_id: str | None = None,
    ):
        self.hunt = Hunt(
            title=title,
            description=description,
            difficulty=difficulty,
            is_public=is_public,
            creator_id=creator_id,
        )
        self._nodes: dict[str, StoryNode] = {}
        self._puzzles: dict[str, Puzzle] = {}
        self._ids = itertools.count(1)

    def _local_id(self, kind: str) -> str:
        return f"{LOCAL_ID_PREFIX}{kind}-{next(self._ids)}"

    def _claim_id(self, local_id: str | None, kind: str) -> str:
        if local_id is None:
            return self._local_id(kind)
        if local_id in self._nodes or local_id in self._puzzles:
            raise AuthoringValidationError([f"Local id '{local_id}' is already in use"])
        return local_id

    @property
    def nodes(self) -> list[StoryNode]:
        """Nodes in display order."""
        return sorted(self._nodes.values(), key=lambda n: n.display_order)

    @property
    def puzzles(self) -> list[Puzzle]:
        return list(self._puzzles.values())

    @property
    def starting_node(self) -> StoryNode | None:
        for node in self._nodes.values():
            if node.is_starting_node:
                return node
        return None

    def get_node(self, local_id: str) -> StoryNode:
        node = self._nodes.get(local_id)
        if node is None:
            raise AuthoringValidationError([f"Unknown node '{local_id}'"])
        return node

    def get_puzzle(self, local_id: str) -> Puzzle:
        puzzle = self._puzzles.get(local_id)
        if puzzle is None:
            raise AuthoringValidationError([f"Unknown puzzle '{local_id}'"])
        return puzzle

    # Nodes

    def add_node(
        self,
        node_kind: NodeKind | str,
        content: dict[str, Any] | NodeContent,
        choices: Iterable[Choice | dict[str, Any]] | None = None,
        is_starting_node: bool | None = None,
        local_id: str | None = None,
    ) -> StoryNode:
        """
        Add a node at the end of the display order.

        The first node added becomes the starting node unless told otherwise.
        `local_id` lets an importer keep its own ids; one is generated if absent.
        """
        content = parse_content(node_kind, content)
        node = StoryNode(
            node_id=self._claim_id(local_id, "node"),
            node_kind=NodeKind(node_kind),
            content=content,
            display_order=len(self._nodes),
        )
        if choices is not None:
            self._check_choice_node(node)
            node.choices = _build_choices(choices)
        self._nodes[node.node_id] = node

        if is_starting_node is None:
            is_starting_node = len(self._nodes) == 1
        if is_starting_node:
            self.set_starting_node(node.node_id)
        return node

    def update_node_content(self, local_id: str, content: dict[str, Any] | NodeContent) -> StoryNode:
        node = self.get_node(local_id)
        node.content = parse_content(node.node_kind, content)
        return node

    def update_choices(self, local_id: str, choices: Iterable[Choice | dict[str, Any]]) -> StoryNode:
        """Replace a choice node's choices; list order becomes display order."""
        node = self.get_node(local_id)
        self._check_choice_node(node)
        node.choices = _build_choices(choices)
        return node

    def delete_node(self, local_id: str) -> list[str]:
        """
        Remove a node. Returns the ids of nodes that still reference it.

        Refuses to delete the starting node while other nodes exist.
        Deleting a referenced node is allowed; the dangling references
        fail validation at publish time.
        """
        node = self.get_node(local_id)
        if node.is_starting_node and len(self._nodes) > 1:
            raise AuthoringValidationError(
                [f"Cannot delete starting node '{local_id}' while other nodes exist"]
            )

        referrers = [
            other.node_id
            for other in self.nodes
            if other.node_id != local_id
            and any(target == local_id for _, target in node_references(other))
        ]
        if referrers:
            logger.warning(
                "Deleting node %s still referenced by %s", local_id, ", ".join(referrers)
            )

        del self._nodes[local_id]
        self.reorder()
        return referrers

    def set_starting_node(self, local_id: str) -> StoryNode:
        """Make `local_id` the only starting node."""
        target = self.get_node(local_id)
        for node in self._nodes.values():
            node.is_starting_node = node is target
        return target

    def reorder(self, order: Iterable[str] | None = None) -> list[StoryNode]:
        """
        Reindex display_order to 0..n-1.

        Nodes named in `order` come first in that order; the rest keep
        their current relative order.
        """
        order = list(order or [])
        for local_id in order:
            self.get_node(local_id)
        if len(set(order)) != len(order):
            raise AuthoringValidationError(["Reorder lists a node more than once"])

        named = [self._nodes[local_id] for local_id in order]
        named_ids = set(order)
        rest = [node for node in self.nodes if node.node_id not in named_ids]
        for index, node in enumerate(named + rest):
            node.display_order = index
        return self.nodes

    def move_node(self, local_id: str, offset: int) -> list[StoryNode]:
        """Move a node `offset` places in the display order, clamped to the ends."""
        ids = [node.node_id for node in self.nodes]
        current = ids.index(self.get_node(local_id).node_id)
        target = max(0, min(len(ids) - 1, current + offset))
        ids.insert(target, ids.pop(current))
        return self.reorder(ids)

    def _check_choice_node(self, node: StoryNode) -> None:
        if node.node_kind != NodeKind.CHOICE:
            raise AuthoringValidationError(
                [f"Node '{node.node_id}' is a {node.node_kind.value} node and cannot have choices"]
            )

    # Puzzles

    def add_puzzle(
        self,
        cipher_kind: CipherKind | str,
        solution: str,
        clue_text: str | None = None,
        cipher_config: CipherConfig | dict[str, Any] | None = None,
        points: int = 0,
        hints: Iterable[Hint | dict[str, Any] | str] = (),
        title: str = "",
        local_id: str | None = None,
    ) -> Puzzle:
        """
        Add a puzzle.

        The cipher config gets its defaults and is checked now, raising
        CipherConfigError. Without `clue_text` the clue is the solution
        encoded with that config; riddles must supply their own clue, and an
        anagram solution must itself solve its clue.
        """
        cipher_kind = CipherKind(cipher_kind)
        codec = get_codec(cipher_kind)
        if not isinstance(cipher_config, CipherConfig):
            cipher_config = CipherConfig.from_dict(cipher_config)
        cipher_config = codec.with_defaults(cipher_config)

        hints = [_build_hint(hint) for hint in hints]
        errors = []
        if points < 0:
            errors.append("Puzzle points must be >= 0")
        if len(hints) > MAX_HINTS:
            errors.append(f"A puzzle can have at most {MAX_HINTS} hints")
        if clue_text is None and cipher_kind == CipherKind.RIDDLE:
            errors.append("A riddle needs its clue text")
        if errors:
            raise AuthoringValidationError(errors)

        if clue_text is None:
            clue_text = codec.encode(solution, cipher_config)
        if cipher_kind == CipherKind.ANAGRAM and not verify_anagram(clue_text, solution):
            raise AuthoringValidationError(
                ["An anagram solution must use exactly the clue's letters and read as at least two words"]
            )

        puzzle = Puzzle(
            puzzle_id=self._claim_id(local_id, "puzzle"),
            clue_text=clue_text,
            cipher_kind=cipher_kind,
            cipher_config=cipher_config,
            solution=solution,
            points=points,
            hints=hints,
            title=title,
        )
        self._puzzles[puzzle.puzzle_id] = puzzle
        return puzzle

    def validate(self) -> ValidationResult:
        return validate_graph(self.nodes, self.puzzles)


def _build_choices(choices: Iterable[Choice | dict[str, Any]]) -> list[Choice]:
    built = []
    for index, choice in enumerate(choices):
        if isinstance(choice, dict):
            choice = Choice.from_dict(choice)
        choice.display_order = index
        built.append(choice)
    return built


def _build_hint(hint: Hint | dict[str, Any] | str) -> Hint:
    if isinstance(hint, Hint):
        return hint
    if isinstance(hint, str):
        return Hint(text=hint)
    return Hint(text=hint["text"], cost=hint.get("cost", 0))
