"""Puzzles - the encoded clues that gate progression."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from ..ciphers.base import CipherConfig, CipherKind

MAX_HINTS = 2


@dataclass
class Hint:
    text: str
    cost: int = 0


@dataclass
class Puzzle:
    """
    A clue, the cipher it is written in, and its expected answer.

    `solution` is authoritative: the evaluator compares attempts against
    it and never re-decodes `clue_text`. Immutable once published.
    """
    puzzle_id: str
    clue_text: str
    cipher_kind: CipherKind
    solution: str = ""
    cipher_config: CipherConfig = field(default_factory=CipherConfig)
    points: int = 0
    hints: list[Hint] = field(default_factory=list)
    title: str = ""
    hunt_id: str | None = None

    def __post_init__(self):
        self.cipher_kind = CipherKind(self.cipher_kind)
        if isinstance(self.cipher_config, dict):
            self.cipher_config = CipherConfig.from_dict(self.cipher_config)

    def get_hint(self, index: int) -> Hint | None:
        if 0 <= index < len(self.hints):
            return self.hints[index]
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "puzzle_id": self.puzzle_id,
            "hunt_id": self.hunt_id,
            "title": self.title,
            "clue_text": self.clue_text,
            "cipher_kind": self.cipher_kind.value,
            "cipher_config": self.cipher_config.to_dict(),
            "solution": self.solution,
            "points": self.points,
            "hints": [{"text": h.text, "cost": h.cost} for h in self.hints],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Puzzle:
        return cls(
            puzzle_id=data["puzzle_id"],
            hunt_id=data.get("hunt_id"),
            title=data.get("title", ""),
            clue_text=data["clue_text"],
            cipher_kind=CipherKind(data["cipher_kind"]),
            cipher_config=CipherConfig.from_dict(data.get("cipher_config")),
            solution=data.get("solution", ""),
            points=data.get("points", 0),
            hints=[Hint(text=h["text"], cost=h.get("cost", 0)) for h in data.get("hints", [])],
        )
