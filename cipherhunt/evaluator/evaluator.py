"""
Puzzle Evaluator - Decides whether an attempt solves a puzzle.

Policy:
- the puzzle's stored solution is authoritative; clue text is never decoded
- riddles compare the normalized attempt with the stored solution
- anagrams check the letter multiset of the clue and reject degenerate phrases
- an empty attempt is simply incorrect

Hints cost points once per player and hint; revealing again is free.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging

from ..ciphers.registry import validate_solution

if TYPE_CHECKING:
    from ..play.progress import UserHuntProgress
    from ..story_graph.puzzle import Puzzle

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "Correct!"
INCORRECT_FEEDBACK = "Not quite. Try again."
EMPTY_FEEDBACK = "Enter an answer to try."


@dataclass
class EvaluationResult:
    correct: bool
    feedback: str = ""


@dataclass
class HintResult:
    """
    Outcome of revealing a hint.

    `cost_charged` is 0 when the hint had already been revealed, or
    when the hint is free.
    """
    hint_text: str
    hint_index: int
    cost_charged: int
    already_revealed: bool
    progress: UserHuntProgress


def hint_key(puzzle_id: str, hint_index: int) -> str:
    return f"{puzzle_id}:{hint_index}"


class PuzzleEvaluator:
    """Stateless; safe to share between sessions."""

    def evaluate(self, puzzle: Puzzle, attempt: str | None) -> EvaluationResult:
        if attempt is None or not attempt.strip():
            return EvaluationResult(correct=False, feedback=EMPTY_FEEDBACK)
        if validate_solution(attempt, puzzle):
            return EvaluationResult(correct=True, feedback=CORRECT_FEEDBACK)
        return EvaluationResult(correct=False, feedback=INCORRECT_FEEDBACK)

    def reveal_hint(self, puzzle: Puzzle, hint_index: int, progress: UserHuntProgress) -> HintResult:
        """
        Reveal one of the puzzle's hints for this player.

        The first reveal deducts the hint's cost, floored so score never
        goes below zero. Raises IndexError if the puzzle has no such hint.
        """
        hint = puzzle.get_hint(hint_index)
        if hint is None:
            raise IndexError(f"Puzzle '{puzzle.puzzle_id}' has no hint {hint_index}")

        key = hint_key(puzzle.puzzle_id, hint_index)
        if key in progress.revealed_hints:
            return HintResult(
                hint_text=hint.text,
                hint_index=hint_index,
                cost_charged=0,
                already_revealed=True,
                progress=progress,
            )

        charged = min(hint.cost, progress.score)
        if charged:
            logger.info(
                "Charging %d point(s) to %s for hint %d of puzzle %s",
                charged, progress.user_id, hint_index, puzzle.puzzle_id,
            )
        new_progress = progress._copy_with(
            score=progress.score - charged,
            revealed_hints=progress.revealed_hints + [key],
        )
        return HintResult(
            hint_text=hint.text,
            hint_index=hint_index,
            cost_charged=charged,
            already_revealed=False,
            progress=new_progress,
        )
