"""Evaluator - puzzle answer checking and hint accounting."""

from .evaluator import PuzzleEvaluator, EvaluationResult, HintResult, hint_key

__all__ = [
    "PuzzleEvaluator",
    "EvaluationResult",
    "HintResult",
    "hint_key",
]
