"""
Graph Validation - Global invariants of a hunt.

Checks that:
1. Exactly one node is the starting node
2. Every node reference resolves to a node in the graph, or is null
3. Every puzzle gate references an existing puzzle
4. No puzzle gate has both its success and failure edges null
5. Every puzzle has a usable cipher config, points >= 0, at most two hints
6. Every anagram puzzle's solution is itself an accepted answer to its clue

Nothing is repaired: problems are reported as errors, and suspicious but
legal shapes (unreachable nodes, choice nodes without choices) as warnings.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from ..ciphers.anagram import verify_anagram
from ..ciphers.base import CipherKind
from ..ciphers.registry import get_codec
from ..errors import AuthoringValidationError, CipherConfigError
from .content import NodeKind, PuzzleGateContent
from .nodes import StoryNode, node_references
from .puzzle import MAX_HINTS, Puzzle


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise AuthoringValidationError(self.errors)


def validate_graph(nodes: Iterable[StoryNode], puzzles: Iterable[Puzzle] = ()) -> ValidationResult:
    """Validate a complete hunt graph and its puzzle set."""
    nodes = list(nodes)
    puzzles = list(puzzles)
    errors: list[str] = []
    warnings: list[str] = []

    node_ids: set[str] = set()
    for node in nodes:
        if node.node_id in node_ids:
            errors.append(f"Duplicate node id '{node.node_id}'")
        node_ids.add(node.node_id)

    puzzle_ids = {puzzle.puzzle_id for puzzle in puzzles}

    starts = [node.node_id for node in nodes if node.is_starting_node]
    if len(starts) != 1:
        errors.append(f"Hunt must have exactly one starting node, found {len(starts)}")

    for node in nodes:
        errors.extend(_validate_node(node, node_ids, puzzle_ids))
        if node.node_kind == NodeKind.CHOICE and not node.choices:
            warnings.append(f"Choice node '{node.node_id}' offers no choices")

    for puzzle in puzzles:
        errors.extend(validate_puzzle(puzzle))

    if len(starts) == 1:
        unreachable = node_ids - _reachable(starts[0], nodes)
        for node_id in sorted(unreachable):
            warnings.append(f"Node '{node_id}' is unreachable from the starting node")

    if not nodes:
        warnings.append("Hunt has no nodes")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def _validate_node(node: StoryNode, node_ids: set[str], puzzle_ids: set[str]) -> list[str]:
    errors = []
    for label, target in node_references(node):
        if target is not None and target not in node_ids:
            errors.append(f"Node '{node.node_id}' {label} references unknown node '{target}'")

    content = node.content
    if isinstance(content, PuzzleGateContent):
        if content.puzzle_id not in puzzle_ids:
            errors.append(
                f"Puzzle gate '{node.node_id}' references unknown puzzle '{content.puzzle_id}'"
            )
        if content.success is None and content.failure is None:
            errors.append(f"Puzzle gate '{node.node_id}' has neither a success nor a failure edge")

    return errors


def validate_puzzle(puzzle: Puzzle) -> list[str]:
    """Validate one puzzle's own fields."""
    errors = []
    if puzzle.points < 0:
        errors.append(f"Puzzle '{puzzle.puzzle_id}' has negative points")
    if len(puzzle.hints) > MAX_HINTS:
        errors.append(f"Puzzle '{puzzle.puzzle_id}' has more than {MAX_HINTS} hints")
    for i, hint in enumerate(puzzle.hints):
        if hint.cost < 0:
            errors.append(f"Puzzle '{puzzle.puzzle_id}' hint {i} has a negative cost")
    try:
        get_codec(puzzle.cipher_kind).check_config(puzzle.cipher_config)
    except CipherConfigError as e:
        errors.append(f"Puzzle '{puzzle.puzzle_id}': {e}")
    if puzzle.cipher_kind == CipherKind.ANAGRAM and not verify_anagram(puzzle.clue_text, puzzle.solution):
        errors.append(
            f"Puzzle '{puzzle.puzzle_id}': anagram solution must use exactly the clue's letters"
            " and read as at least two words"
        )
    return errors


def _reachable(start_id: str, nodes: list[StoryNode]) -> set[str]:
    by_id = {node.node_id: node for node in nodes}
    seen = {start_id}
    queue = deque([start_id])
    while queue:
        node = by_id.get(queue.popleft())
        if node is None:
            continue
        for _, target in node_references(node):
            if target is not None and target not in seen:
                seen.add(target)
                queue.append(target)
    return seen
