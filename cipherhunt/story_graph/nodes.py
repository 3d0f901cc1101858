"""
Story Nodes - The units of a hunt's narrative graph.

A node carries a kind, a content payload matching that kind, and, for
choice nodes, an ordered list of Choice records. Edges are the node
references inside content plus the choice targets.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .content import NodeContent, NodeKind, parse_content


def state_matches(story_state: dict[str, Any], required: dict[str, Any] | None) -> bool:
    """True when every required key is present in story_state with an equal value."""
    if not required:
        return True
    return all(key in story_state and story_state[key] == value for key, value in required.items())


@dataclass
class Choice:
    """An option offered by a choice node."""
    text: str
    target_node_id: str | None = None
    state_patch: dict[str, Any] | None = None
    feedback: str | None = None
    display_order: int = 0
    required_state: dict[str, Any] | None = None

    def is_unlocked(self, story_state: dict[str, Any]) -> bool:
        return state_matches(story_state, self.required_state)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "text": self.text,
            "target_node_id": self.target_node_id,
            "display_order": self.display_order,
        }
        if self.state_patch is not None:
            data["state_patch"] = dict(self.state_patch)
        if self.feedback is not None:
            data["feedback"] = self.feedback
        if self.required_state is not None:
            data["required_state"] = dict(self.required_state)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Choice:
        return cls(
            text=data["text"],
            target_node_id=data.get("target_node_id"),
            state_patch=data.get("state_patch"),
            feedback=data.get("feedback"),
            display_order=data.get("display_order", 0),
            required_state=data.get("required_state"),
        )


@dataclass
class StoryNode:
    node_id: str
    node_kind: NodeKind
    content: NodeContent
    hunt_id: str | None = None
    display_order: int = 0
    is_starting_node: bool = False
    choices: list[Choice] = field(default_factory=list)

    def __post_init__(self):
        self.node_kind = NodeKind(self.node_kind)
        self.content = parse_content(self.node_kind, self.content)

    @property
    def is_end(self) -> bool:
        return self.node_kind == NodeKind.END

    def ordered_choices(self) -> list[Choice]:
        """Choices sorted by display_order, ties kept in list order."""
        return sorted(self.choices, key=lambda c: c.display_order)

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "hunt_id": self.hunt_id,
            "node_kind": self.node_kind.value,
            "content": self.content.to_dict(),
            "display_order": self.display_order,
            "is_starting_node": self.is_starting_node,
            "choices": [choice.to_dict() for choice in self.choices],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StoryNode:
        return cls(
            node_id=data["node_id"],
            hunt_id=data.get("hunt_id"),
            node_kind=NodeKind(data["node_kind"]),
            content=parse_content(data["node_kind"], data.get("content")),
            display_order=data.get("display_order", 0),
            is_starting_node=data.get("is_starting_node", False),
            choices=[Choice.from_dict(c) for c in data.get("choices", [])],
        )


def node_references(node: StoryNode) -> list[tuple[str, str | None]]:
    """
    Every outgoing edge of a node as (label, target) pairs.

    Labels name where the reference lives: a content field such as
    "success", or "choices[i]" for a choice target. Targets may be None.
    """
    refs = list(node.content.references().items())
    if node.node_kind == NodeKind.CHOICE:
        refs.extend(
            (f"choices[{i}]", choice.target_node_id)
            for i, choice in enumerate(node.choices)
        )
    return refs
