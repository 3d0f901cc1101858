"""
Transitions - Player inputs to the play state machine, and their results.

Each node kind accepts one kind of transition:
- narrative / dialogue / visual_cue: ADVANCE
- choice: CHOOSE
- puzzle_gate: SUBMIT_ATTEMPT (and REVEAL_HINT, which does not move)
- action_trigger: TRIGGER_ACTION
GO_BACK is accepted anywhere the path allows it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TransitionType(Enum):
    ADVANCE = "advance"
    CHOOSE = "choose"
    SUBMIT_ATTEMPT = "submit_attempt"
    TRIGGER_ACTION = "trigger_action"
    REVEAL_HINT = "reveal_hint"
    GO_BACK = "go_back"


@dataclass
class Transition:
    transition_type: TransitionType
    choice_index: int | None = None
    attempt: str | None = None
    hint_index: int | None = None

    @classmethod
    def advance(cls) -> Transition:
        return cls(transition_type=TransitionType.ADVANCE)

    @classmethod
    def choose(cls, choice_index: int) -> Transition:
        """Pick the choice at `choice_index` in display order."""
        return cls(transition_type=TransitionType.CHOOSE, choice_index=choice_index)

    @classmethod
    def submit_attempt(cls, attempt: str) -> Transition:
        return cls(transition_type=TransitionType.SUBMIT_ATTEMPT, attempt=attempt)

    @classmethod
    def trigger_action(cls) -> Transition:
        return cls(transition_type=TransitionType.TRIGGER_ACTION)

    @classmethod
    def reveal_hint(cls, hint_index: int) -> Transition:
        return cls(transition_type=TransitionType.REVEAL_HINT, hint_index=hint_index)

    @classmethod
    def go_back(cls) -> Transition:
        return cls(transition_type=TransitionType.GO_BACK)


@dataclass
class TransitionResult:
    """
    Result of applying a transition.

    Contains:
    - Whether the transition was accepted
    - The new progress record (if accepted)
    - Error and error code (if refused)
    - Puzzle outcome, choice feedback and hint text for the caller to show
    """
    success: bool
    new_progress: Any | None = None  # UserHuntProgress
    error: str | None = None
    error_code: str | None = None

    correct: bool | None = None
    feedback: str | None = None
    hint_text: str | None = None
    points_awarded: int = 0
    changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> TransitionResult:
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_progress(
        cls,
        progress: Any,
        changes: list[str] | None = None,
        **outcome,
    ) -> TransitionResult:
        return cls(success=True, new_progress=progress, changes=changes or [], **outcome)
