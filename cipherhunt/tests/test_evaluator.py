"""
Tests for the puzzle evaluator.

Tests:
- Answer normalization
- Empty attempts
- Hint cost accounting
"""

import pytest

from ..evaluator import PuzzleEvaluator, hint_key
from ..play import UserHuntProgress


class TestEvaluate:
    """Tests for evaluate()."""

    def test_correct(self, evaluator, caesar_puzzle):
        result = evaluator.evaluate(caesar_puzzle, "hello world")
        assert result.correct
        assert result.feedback

    def test_whitespace_and_case_normalized(self, evaluator, caesar_puzzle):
        assert evaluator.evaluate(caesar_puzzle, "  Hello   WORLD\n").correct

    def test_incorrect(self, evaluator, caesar_puzzle):
        assert not evaluator.evaluate(caesar_puzzle, "KHOOR ZRUOG").correct

    @pytest.mark.parametrize("attempt", ["", "   ", None])
    def test_empty_attempt_is_incorrect(self, evaluator, caesar_puzzle, attempt):
        """An empty attempt is an ordinary wrong answer, not an error."""
        assert not evaluator.evaluate(caesar_puzzle, attempt).correct


class TestRevealHint:
    """Tests for reveal_hint()."""

    @pytest.fixture
    def progress(self):
        return UserHuntProgress.begin("u1", "h1", "gate")._copy_with(score=20)

    def test_first_reveal_charges(self, evaluator, caesar_puzzle, progress):
        result = evaluator.reveal_hint(caesar_puzzle, 0, progress)
        assert result.hint_text == "Shift each letter back"
        assert result.cost_charged == 2
        assert not result.already_revealed
        assert result.progress.score == 18
        assert result.progress.revealed_hints == [hint_key("p-hello", 0)]

    def test_second_reveal_is_free(self, evaluator, caesar_puzzle, progress):
        """Revealing the same hint again does not charge again."""
        first = evaluator.reveal_hint(caesar_puzzle, 0, progress)
        second = evaluator.reveal_hint(caesar_puzzle, 0, first.progress)
        assert second.already_revealed
        assert second.cost_charged == 0
        assert second.progress.score == 18
        assert second.hint_text == first.hint_text

    def test_each_hint_charged_separately(self, evaluator, caesar_puzzle, progress):
        first = evaluator.reveal_hint(caesar_puzzle, 0, progress)
        second = evaluator.reveal_hint(caesar_puzzle, 1, first.progress)
        assert second.progress.score == 13

    def test_score_never_negative(self, evaluator, caesar_puzzle, progress):
        poor = progress._copy_with(score=3)
        result = evaluator.reveal_hint(caesar_puzzle, 1, poor)
        assert result.cost_charged == 3
        assert result.progress.score == 0

    def test_original_progress_untouched(self, evaluator, caesar_puzzle, progress):
        evaluator.reveal_hint(caesar_puzzle, 0, progress)
        assert progress.score == 20
        assert progress.revealed_hints == []

    def test_missing_hint(self, evaluator, caesar_puzzle, progress):
        with pytest.raises(IndexError):
            evaluator.reveal_hint(caesar_puzzle, 2, progress)
