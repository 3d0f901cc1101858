"""
Story Graph - Typed narrative graph of a hunt.

- content: one payload model per node kind (the storage format)
- nodes: StoryNode and Choice, plus edge enumeration
- puzzle: Puzzle and Hint
- validation: whole-graph invariants
"""

from .content import (
    NodeKind,
    EndOutcome,
    NodeContent,
    NarrativeContent,
    DialogueContent,
    VisualCueContent,
    PuzzleGateContent,
    ChoiceContent,
    ActionTriggerContent,
    EndContent,
    parse_content,
)
from .nodes import StoryNode, Choice, node_references, state_matches
from .puzzle import Puzzle, Hint, MAX_HINTS
from .validation import ValidationResult, validate_graph, validate_puzzle

__all__ = [
    "NodeKind",
    "EndOutcome",
    "NodeContent",
    "NarrativeContent",
    "DialogueContent",
    "VisualCueContent",
    "PuzzleGateContent",
    "ChoiceContent",
    "ActionTriggerContent",
    "EndContent",
    "parse_content",
    "StoryNode",
    "Choice",
    "node_references",
    "state_matches",
    "Puzzle",
    "Hint",
    "MAX_HINTS",
    "ValidationResult",
    "validate_graph",
    "validate_puzzle",
]
