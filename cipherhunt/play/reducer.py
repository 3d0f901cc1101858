"""
Play Reducer - Applies transitions to player progress.

The reducer is the single point of progress mutation.
All play state changes go through apply().

Design principles:
- Pure: (progress, node, transition) -> new progress; no storage access
- Validates before applying; refusals are results, not exceptions
- story_state patches are shallow, last-write-wins merges
- Points for a puzzle are awarded at most once per player
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULT_PATH_LIMIT, MIN_PATH_LIMIT
from ..evaluator.evaluator import PuzzleEvaluator
from ..story_graph.content import (
    ActionTriggerContent,
    DialogueContent,
    NarrativeContent,
    NodeKind,
    PuzzleGateContent,
    VisualCueContent,
)
from ..story_graph.nodes import Choice, StoryNode, state_matches
from ..story_graph.puzzle import Puzzle
from .progress import ProgressStatus, UserHuntProgress
from .transition import Transition, TransitionResult, TransitionType

CONTINUE_KINDS = frozenset({NodeKind.NARRATIVE, NodeKind.DIALOGUE, NodeKind.VISUAL_CUE})

# Node kind each transition is accepted on
_ACCEPTED_KINDS: dict[TransitionType, frozenset[NodeKind]] = {
    TransitionType.ADVANCE: CONTINUE_KINDS,
    TransitionType.CHOOSE: frozenset({NodeKind.CHOICE}),
    TransitionType.SUBMIT_ATTEMPT: frozenset({NodeKind.PUZZLE_GATE}),
    TransitionType.REVEAL_HINT: frozenset({NodeKind.PUZZLE_GATE}),
    TransitionType.TRIGGER_ACTION: frozenset({NodeKind.ACTION_TRIGGER}),
}


def merge_state(story_state: dict[str, Any], patch: dict[str, Any] | None) -> dict[str, Any]:
    """Shallow merge; keys in `patch` overwrite, nested values are replaced whole."""
    merged = dict(story_state)
    if patch:
        merged.update(patch)
    return merged


def available_choices(node: StoryNode, story_state: dict[str, Any]) -> list[Choice]:
    """Unlocked choices of a choice node, in display order."""
    if node.node_kind != NodeKind.CHOICE:
        return []
    return [choice for choice in node.ordered_choices() if choice.is_unlocked(story_state)]


@dataclass
class PlayReducer:
    """
    Reducer applies transitions to progress.

    Stateless - all play state is in UserHuntProgress.
    """
    evaluator: PuzzleEvaluator = field(default_factory=PuzzleEvaluator)
    path_limit: int = DEFAULT_PATH_LIMIT

    def __post_init__(self):
        self.path_limit = max(self.path_limit, MIN_PATH_LIMIT)

    def apply(
        self,
        progress: UserHuntProgress,
        node: StoryNode | None,
        transition: Transition,
        puzzle: Puzzle | None = None,
    ) -> TransitionResult:
        """
        Apply a transition to the player's progress on `node`.

        `node` must be the player's current node; `puzzle` is required
        for puzzle gate transitions. Returns TransitionResult with the
        new progress or a refusal.
        """
        refusal = self._validate_transition(progress, node, transition, puzzle)
        if refusal:
            error, error_code = refusal
            return TransitionResult.failure(error, error_code=error_code)

        handler = self._get_handler(transition.transition_type)
        if not handler:
            return TransitionResult.failure(
                f"No handler for transition type: {transition.transition_type}",
                error_code="NO_HANDLER",
            )
        return handler(progress, node, transition, puzzle)

    def arrive(self, progress: UserHuntProgress, node: StoryNode) -> UserHuntProgress:
        """Settle progress on a freshly entered node; end nodes complete the hunt."""
        if node.is_end and progress.is_active:
            return progress._copy_with(status=ProgressStatus.COMPLETED)
        return progress

    def _validate_transition(
        self,
        progress: UserHuntProgress,
        node: StoryNode | None,
        transition: Transition,
        puzzle: Puzzle | None,
    ) -> tuple[str, str] | None:
        """
        Check that a transition is legal in the current progress.

        Returns (error message, error code) if refused, None if legal.
        """
        if not progress.is_active:
            return f"Hunt is {progress.status.value} - no moves allowed", "HUNT_NOT_ACTIVE"

        if transition.transition_type == TransitionType.GO_BACK:
            if len(progress.visited_path) < 2:
                return "Nothing to go back to", "NO_HISTORY"
            return None

        if node is None or node.node_id != progress.current_node_id:
            return "Transition must be applied to the current node", "NODE_MISMATCH"

        accepted = _ACCEPTED_KINDS.get(transition.transition_type, frozenset())
        if node.node_kind not in accepted:
            return (
                f"Cannot {transition.transition_type.value} on a {node.node_kind.value} node",
                "WRONG_NODE_KIND",
            )

        if transition.transition_type == TransitionType.CHOOSE:
            choices = node.ordered_choices()
            index = transition.choice_index
            if index is None or not 0 <= index < len(choices):
                return f"No choice at index {index}", "INVALID_CHOICE"
            if not choices[index].is_unlocked(progress.story_state):
                return "That choice is locked", "CHOICE_LOCKED"

        if transition.transition_type == TransitionType.TRIGGER_ACTION:
            if not state_matches(progress.story_state, node.content.required_state):
                return "That action is not available yet", "ACTION_LOCKED"

        if transition.transition_type in {TransitionType.SUBMIT_ATTEMPT, TransitionType.REVEAL_HINT}:
            if puzzle is None or puzzle.puzzle_id != node.content.puzzle_id:
                return f"Puzzle '{node.content.puzzle_id}' was not supplied", "PUZZLE_MISMATCH"
            if transition.transition_type == TransitionType.REVEAL_HINT:
                hint_index = transition.hint_index
                if hint_index is None or puzzle.get_hint(hint_index) is None:
                    return f"No hint at index {transition.hint_index}", "NO_SUCH_HINT"

        return None

    def _get_handler(self, transition_type: TransitionType):
        handlers = {
            TransitionType.ADVANCE: self._handle_advance,
            TransitionType.CHOOSE: self._handle_choose,
            TransitionType.SUBMIT_ATTEMPT: self._handle_submit_attempt,
            TransitionType.TRIGGER_ACTION: self._handle_trigger_action,
            TransitionType.REVEAL_HINT: self._handle_reveal_hint,
            TransitionType.GO_BACK: self._handle_go_back,
        }
        return handlers.get(transition_type)

    def _move(self, progress: UserHuntProgress, target_id: str | None, **changes) -> UserHuntProgress:
        """
        Move to `target_id`, recording it on the visited path.

        A null target ends the hunt: current node is cleared and the
        status becomes completed.
        """
        if target_id is None:
            return progress._copy_with(
                current_node_id=None,
                status=ProgressStatus.COMPLETED,
                **changes,
            )
        return progress._copy_with(
            current_node_id=target_id,
            status=ProgressStatus.IN_PROGRESS,
            visited_path=self._extend_path(progress.visited_path, target_id),
            **changes,
        )

    def _extend_path(self, path: list[str], node_id: str) -> list[str]:
        if path and path[-1] == node_id:
            return list(path)
        return (path + [node_id])[-self.path_limit:]

    def _handle_advance(self, progress, node, transition, puzzle) -> TransitionResult:
        content: NarrativeContent | DialogueContent | VisualCueContent = node.content
        new_progress = self._move(progress, content.next)
        return TransitionResult.success_with_progress(
            new_progress,
            changes=[_describe_move(node.node_id, content.next)],
        )

    def _handle_choose(self, progress, node, transition, puzzle) -> TransitionResult:
        choice = node.ordered_choices()[transition.choice_index]
        new_progress = self._move(
            progress,
            choice.target_node_id,
            story_state=merge_state(progress.story_state, choice.state_patch),
        )
        changes = [f"Chose '{choice.text}'", _describe_move(node.node_id, choice.target_node_id)]
        if choice.state_patch:
            changes.append(f"Story state set: {', '.join(sorted(choice.state_patch))}")
        return TransitionResult.success_with_progress(
            new_progress,
            changes=changes,
            feedback=choice.feedback,
        )

    def _handle_submit_attempt(self, progress, node, transition, puzzle) -> TransitionResult:
        content: PuzzleGateContent = node.content
        evaluation = self.evaluator.evaluate(puzzle, transition.attempt)

        if not evaluation.correct:
            if content.failure is None:
                return TransitionResult.success_with_progress(
                    progress,
                    changes=["Incorrect answer"],
                    correct=False,
                    feedback=evaluation.feedback,
                )
            return TransitionResult.success_with_progress(
                self._move(progress, content.failure),
                changes=["Incorrect answer", _describe_move(node.node_id, content.failure)],
                correct=False,
                feedback=evaluation.feedback,
            )

        awarded = 0
        changes = ["Puzzle solved"]
        extra: dict[str, Any] = {}
        if not progress.has_completed(puzzle.puzzle_id):
            awarded = puzzle.points
            extra = {
                "score": progress.score + awarded,
                "completed_puzzle_ids": progress.completed_puzzle_ids + [puzzle.puzzle_id],
            }
            changes.append(f"Scored {awarded} point(s)")
        changes.append(_describe_move(node.node_id, content.success))

        return TransitionResult.success_with_progress(
            self._move(progress, content.success, **extra),
            changes=changes,
            correct=True,
            feedback=evaluation.feedback,
            points_awarded=awarded,
        )

    def _handle_trigger_action(self, progress, node, transition, puzzle) -> TransitionResult:
        content: ActionTriggerContent = node.content
        new_progress = self._move(
            progress,
            content.success,
            story_state=merge_state(progress.story_state, content.state_patch),
        )
        return TransitionResult.success_with_progress(
            new_progress,
            changes=[f"Triggered '{content.label}'", _describe_move(node.node_id, content.success)],
        )

    def _handle_reveal_hint(self, progress, node, transition, puzzle) -> TransitionResult:
        hint = self.evaluator.reveal_hint(puzzle, transition.hint_index, progress)
        changes = [f"Revealed hint {transition.hint_index + 1}"]
        if hint.cost_charged:
            changes.append(f"Hint cost {hint.cost_charged} point(s)")
        return TransitionResult.success_with_progress(
            hint.progress,
            changes=changes,
            hint_text=hint.hint_text,
        )

    def _handle_go_back(self, progress, node, transition, puzzle) -> TransitionResult:
        path = progress.visited_path[:-1]
        new_progress = progress._copy_with(
            current_node_id=path[-1],
            status=ProgressStatus.IN_PROGRESS,
            visited_path=path,
        )
        return TransitionResult.success_with_progress(
            new_progress,
            changes=[f"Went back to {path[-1]}"],
        )


def _describe_move(from_id: str, to_id: str | None) -> str:
    if to_id is None:
        return f"Hunt ended after {from_id}"
    return f"Moved from {from_id} to {to_id}"


def apply_transition(
    progress: UserHuntProgress,
    node: StoryNode | None,
    transition: Transition,
    puzzle: Puzzle | None = None,
    path_limit: int = DEFAULT_PATH_LIMIT,
) -> TransitionResult:
    """
    Convenience function to apply a transition.

    Creates a PlayReducer and applies the transition.
    """
    reducer = PlayReducer(path_limit=path_limit)
    return reducer.apply(progress, node, transition, puzzle)
