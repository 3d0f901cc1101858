"""
Publisher - Two-phase publish of a draft hunt.

Node content can point at nodes and puzzles that have no persisted id
until they are inserted, so publishing runs in two passes:

1. Validate the draft; nothing is written if it is invalid.
2. Phase 1: insert every puzzle, then every node, building a
   local id -> persisted id map. Puzzle gates get their persisted
   puzzle id here; node references still hold local ids.
3. Phase 2: rewrite every node reference through the map, push the
   updated content, and record the starting node on the hunt.

Phase 2 is a pure rewrite and can be re-run: a reference that is
already a persisted id is left as is. If it fails part-way, PublishError
carries what is needed to run it again.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
import logging

from ..errors import AuthoringValidationError, PublishError
from ..storage.base import Hunt, HuntStore
from ..story_graph.content import NodeContent, PuzzleGateContent
from ..story_graph.nodes import StoryNode, node_references
from ..story_graph.puzzle import Puzzle
from .draft import DraftGraph

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """A published hunt and how draft ids were mapped onto it."""
    hunt: Hunt
    id_map: dict[str, str]
    nodes: list[StoryNode] = field(default_factory=list)
    puzzles: list[Puzzle] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class Publisher:
    """Publishes DraftGraphs into a HuntStore."""

    def __init__(self, store: HuntStore):
        self.store = store

    def publish(self, draft: DraftGraph) -> PublishResult:
        """
        Validate and persist a draft.

        Raises AuthoringValidationError before writing anything if the
        draft is invalid, and PublishError if the store fails afterwards.
        """
        validation = draft.validate()
        if not validation.valid:
            raise AuthoringValidationError(validation.errors)

        hunt = self.store.create_hunt(draft.hunt)
        logger.info("Publishing hunt %s (%s)", hunt.hunt_id, hunt.title)

        id_map = self._persist(draft, hunt.hunt_id)
        result = self.resolve_references(draft, hunt.hunt_id, id_map)
        result.warnings = list(validation.warnings)
        return result

    def _persist(self, draft: DraftGraph, hunt_id: str) -> dict[str, str]:
        """Phase 1: insert puzzles, then nodes."""
        id_map: dict[str, str] = {}
        try:
            for puzzle in draft.puzzles:
                stored = self.store.insert_puzzle(replace(puzzle, hunt_id=hunt_id))
                id_map[puzzle.puzzle_id] = stored.puzzle_id

            for node in draft.nodes:
                content = node.content
                if isinstance(content, PuzzleGateContent):
                    content = content.model_copy(update={"puzzle_id": id_map[content.puzzle_id]})
                stored = self.store.insert_node(
                    StoryNode(
                        node_id=node.node_id,
                        hunt_id=hunt_id,
                        node_kind=node.node_kind,
                        content=content,
                        display_order=node.display_order,
                        is_starting_node=node.is_starting_node,
                        choices=[replace(choice) for choice in node.choices],
                    )
                )
                id_map[node.node_id] = stored.node_id
        except Exception as e:
            pending = [node.node_id for node in draft.nodes if node.node_id not in id_map]
            logger.error("Publish of hunt %s failed while inserting: %s", hunt_id, e)
            raise PublishError(
                f"Hunt {hunt_id} failed during insert: {e}",
                hunt_id=hunt_id,
                id_map=id_map,
                pending=pending,
            ) from e

        logger.debug("Hunt %s phase 1 persisted %d record(s)", hunt_id, len(id_map))
        return id_map

    def resolve_references(self, draft: DraftGraph, hunt_id: str, id_map: dict[str, str]) -> PublishResult:
        """
        Phase 2: rewrite local references to persisted ids.

        Safe to call again with the same arguments after a PublishError.
        """
        persisted_ids = set(id_map.values())
        pending = [node.node_id for node in draft.nodes]
        updated = 0

        for node in draft.nodes:
            if not any(target is not None for _, target in node_references(node)):
                pending.remove(node.node_id)
                continue
            try:
                persisted_id = _resolve(node.node_id, id_map, persisted_ids)
                content = _resolve_content(node.content, id_map, persisted_ids)
                choices = None
                if node.choices:
                    choices = [
                        replace(choice, target_node_id=_resolve(choice.target_node_id, id_map, persisted_ids))
                        for choice in node.choices
                    ]
                self.store.update_node_content(persisted_id, content, choices)
            except Exception as e:
                logger.error("Resolving node %s of hunt %s failed: %s", node.node_id, hunt_id, e)
                raise PublishError(
                    f"Hunt {hunt_id} is partially published: node {node.node_id} could not be resolved: {e}",
                    hunt_id=hunt_id,
                    id_map=dict(id_map),
                    pending=list(pending),
                ) from e
            pending.remove(node.node_id)
            updated += 1

        start = draft.starting_node
        try:
            hunt = self.store.set_hunt_starting_node(
                hunt_id, _resolve(start.node_id, id_map, persisted_ids)
            )
        except Exception as e:
            raise PublishError(
                f"Hunt {hunt_id} is partially published: starting node not recorded: {e}",
                hunt_id=hunt_id,
                id_map=dict(id_map),
                pending=[],
            ) from e

        logger.info("Published hunt %s, rewrote references on %d node(s)", hunt_id, updated)
        return PublishResult(
            hunt=hunt,
            id_map=dict(id_map),
            nodes=self.store.list_nodes(hunt_id),
            puzzles=self.store.list_puzzles(hunt_id),
        )


class UnresolvedReferenceError(LookupError):
    """A reference that is neither a known local id nor a persisted id."""


def _resolve(ref: str | None, id_map: dict[str, str], persisted_ids: set[str]) -> str | None:
    if ref is None:
        return None
    if ref in id_map:
        return id_map[ref]
    if ref in persisted_ids:
        return ref
    raise UnresolvedReferenceError(f"'{ref}' does not resolve")


def _resolve_content(content: NodeContent, id_map: dict[str, str], persisted_ids: set[str]) -> NodeContent:
    content = content.with_references({
        name: _resolve(target, id_map, persisted_ids)
        for name, target in content.references().items()
    })
    if isinstance(content, PuzzleGateContent):
        content = content.model_copy(
            update={"puzzle_id": _resolve(content.puzzle_id, id_map, persisted_ids)}
        )
    return content
