"""
Node Content - One payload model per node kind.

This is the wire/storage format of StoryNode.content. Edges live inside
the payload as node references (`next`, `success`, `failure`); a null
reference means the hunt ends there. Unrecognized keys are preserved.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from ..errors import AuthoringValidationError


class NodeKind(str, Enum):
    """Discriminator for node content."""
    NARRATIVE = "narrative"
    DIALOGUE = "dialogue"
    VISUAL_CUE = "visual_cue"
    PUZZLE_GATE = "puzzle_gate"
    CHOICE = "choice"
    ACTION_TRIGGER = "action_trigger"
    END = "end"


class EndOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NEUTRAL = "neutral"


class NodeContent(BaseModel):
    """Base for all content payloads."""
    model_config = {"extra": "allow"}

    # Names of the fields holding node references
    reference_fields: ClassVar[tuple[str, ...]] = ()

    def references(self) -> dict[str, str | None]:
        return {name: getattr(self, name) for name in self.reference_fields}

    def with_references(self, references: dict[str, str | None]) -> NodeContent:
        """Return a copy with the given reference fields replaced."""
        unknown = set(references) - set(self.reference_fields)
        if unknown:
            raise ValueError(f"{type(self).__name__} has no reference field(s) {sorted(unknown)}")
        return self.model_copy(update=references, deep=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class NarrativeContent(NodeContent):
    reference_fields: ClassVar[tuple[str, ...]] = ("next",)

    text: str
    next: str | None = None
    character_pov: str | None = None


class DialogueContent(NodeContent):
    reference_fields: ClassVar[tuple[str, ...]] = ("next",)

    sender: str
    message: str
    timestamp: str | None = None
    next: str | None = None
    visual_style: str | None = None


class VisualCueContent(NodeContent):
    reference_fields: ClassVar[tuple[str, ...]] = ("next",)

    image_url: str | None = None
    audio_url: str | None = None
    caption: str | None = None
    alt_text: str | None = None
    next: str | None = None


class PuzzleGateContent(NodeContent):
    reference_fields: ClassVar[tuple[str, ...]] = ("success", "failure")

    puzzle_id: str
    prompt: str | None = None
    success: str | None = None
    failure: str | None = None


class ChoiceContent(NodeContent):
    prompt: str


class ActionTriggerContent(NodeContent):
    reference_fields: ClassVar[tuple[str, ...]] = ("success",)

    label: str
    success: str | None = None
    state_patch: dict[str, Any] | None = None
    required_state: dict[str, Any] | None = None


class EndContent(NodeContent):
    message: str = ""
    outcome: EndOutcome = EndOutcome.NEUTRAL


CONTENT_MODELS: dict[NodeKind, type[NodeContent]] = {
    NodeKind.NARRATIVE: NarrativeContent,
    NodeKind.DIALOGUE: DialogueContent,
    NodeKind.VISUAL_CUE: VisualCueContent,
    NodeKind.PUZZLE_GATE: PuzzleGateContent,
    NodeKind.CHOICE: ChoiceContent,
    NodeKind.ACTION_TRIGGER: ActionTriggerContent,
    NodeKind.END: EndContent,
}


def parse_content(kind: NodeKind | str, data: dict[str, Any] | NodeContent | None) -> NodeContent:
    """
    Parse a raw payload into the content model for `kind`.

    Raises AuthoringValidationError listing every field problem.
    """
    try:
        kind = NodeKind(kind)
    except ValueError:
        raise AuthoringValidationError([f"Unknown node kind '{kind}'"]) from None

    model = CONTENT_MODELS[kind]
    if isinstance(data, model):
        return data
    if isinstance(data, NodeContent):
        data = data.to_dict()

    try:
        return model.model_validate(data or {})
    except ValidationError as e:
        raise AuthoringValidationError([
            f"{kind.value}.{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ])
