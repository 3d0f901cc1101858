"""
Anagram - scramble the letters.

There is no canonical decode. An attempt is correct when it rearranges
exactly the letters of the clue and reads as a phrase: at least two
words, none of them a stray single letter other than "a", "i" or "o".
"""

from __future__ import annotations
from collections import Counter
from typing import TYPE_CHECKING
import random

from .base import CipherCodec, CipherConfig, CipherKind

if TYPE_CHECKING:
    from ..story_graph.puzzle import Puzzle

SINGLE_LETTER_WORDS = frozenset({"a", "i", "o"})
MIN_WORDS = 2


def letter_counts(text: str) -> Counter:
    return Counter(char for char in text.lower() if "a" <= char <= "z")


def is_letter_rearrangement(original: str, candidate: str) -> bool:
    original_counts = letter_counts(original)
    return bool(original_counts) and original_counts == letter_counts(candidate)


def scramble(text: str, groups: int = 1, rng: random.Random | None = None) -> str:
    """Shuffle the letters of `text` and split them into `groups` words."""
    rng = rng or random.Random()
    letters = [char for char in text.lower() if "a" <= char <= "z"]
    rng.shuffle(letters)
    groups = max(1, min(groups, len(letters)))
    if groups == 1:
        return "".join(letters)
    cuts = sorted(rng.sample(range(1, len(letters)), groups - 1))
    bounds = [0] + cuts + [len(letters)]
    return " ".join("".join(letters[start:end]) for start, end in zip(bounds, bounds[1:]))


def verify_anagram(original: str, solution: str) -> bool:
    if not is_letter_rearrangement(original, solution):
        return False
    words = solution.split()
    if len(words) < MIN_WORDS:
        return False
    return all(len(word) >= 2 or word.lower() in SINGLE_LETTER_WORDS for word in words)


class AnagramCodec(CipherCodec):
    kind = CipherKind.ANAGRAM
    name = "Anagram"
    description = "Rearrange letters to form new words/phrases."

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def check_config(self, config: CipherConfig) -> None:
        groups = config.groups
        if groups is not None:
            self._require(
                isinstance(groups, int) and not isinstance(groups, bool) and groups >= 1,
                f"groups must be a positive integer, got {groups!r}",
            )

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        self.check_config(config)
        return scramble(plaintext, config.groups or 1, self._rng)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        return config.solution or ciphertext

    def validate(self, attempt: str, puzzle: Puzzle) -> bool:
        return verify_anagram(puzzle.clue_text, attempt or "")
