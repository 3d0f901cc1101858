"""Riddle - no transform; the answer is compared as written."""

from __future__ import annotations
from typing import TYPE_CHECKING

from .base import CipherCodec, CipherConfig, CipherKind, normalize_answer

if TYPE_CHECKING:
    from ..story_graph.puzzle import Puzzle


class RiddleCodec(CipherCodec):
    kind = CipherKind.RIDDLE
    name = "Riddle"
    description = "A question or statement phrased puzzlingly."

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        return plaintext

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        return config.solution or ciphertext

    def validate(self, attempt: str, puzzle: Puzzle) -> bool:
        expected = puzzle.solution or puzzle.cipher_config.solution
        normalized = normalize_answer(attempt)
        return bool(normalized) and normalized == normalize_answer(expected)
