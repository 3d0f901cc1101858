"""
Cipher Base - Kinds, configuration and the codec interface.

Every cipher is a deliberately weak, reversible puzzle transform.
A codec provides:
- encode / decode over Unicode text (pure, no hidden state)
- validate: does a player's attempt solve a puzzle of this kind
- check_config: reject bad configuration at authoring time
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any
import re

from ..errors import CipherConfigError

if TYPE_CHECKING:
    from ..story_graph.puzzle import Puzzle


ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_WHITESPACE = re.compile(r"\s+")


class CipherKind(str, Enum):
    """The closed set of supported cipher kinds."""
    CAESAR = "caesar"
    ATBASH = "atbash"
    SUBSTITUTION = "substitution"
    TRANSPOSITION = "transposition"
    ANAGRAM = "anagram"
    MIRROR = "mirror"
    RIDDLE = "riddle"
    BINARY = "binary"
    MORSE = "morse"


@dataclass(frozen=True)
class CipherConfig:
    """
    Per-kind parameter bag.

    Only the fields relevant to a kind are read:
    - shift: caesar
    - key: substitution alphabet or transposition column count
    - advanced: mirror letter-swap variant
    - solution: riddle / anagram expected answer
    - groups: anagram scramble word groups
    """
    shift: int | None = None
    key: str | int | None = None
    advanced: bool = False
    solution: str | None = None
    groups: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CipherConfig:
        """Build a config from a loosely-typed dict, keeping unknown keys in `extra`."""
        if not data:
            return cls()
        known = {"shift", "key", "advanced", "solution", "groups"}
        return cls(
            shift=data.get("shift"),
            key=data.get("key"),
            advanced=bool(data.get("advanced", False)),
            solution=data.get("solution"),
            groups=data.get("groups"),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.shift is not None:
            data["shift"] = self.shift
        if self.key is not None:
            data["key"] = self.key
        if self.advanced:
            data["advanced"] = True
        if self.solution is not None:
            data["solution"] = self.solution
        if self.groups is not None:
            data["groups"] = self.groups
        return data

    def with_values(self, **kwargs) -> CipherConfig:
        """Return a copy with some fields replaced."""
        return replace(self, **kwargs)


def normalize_answer(text: str | None) -> str:
    """Trim, case-fold and collapse internal whitespace for answer comparison."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.strip()).casefold()


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def strip_whitespace(text: str) -> str:
    return _WHITESPACE.sub("", text)


def map_letter(char: str, index_map) -> str:
    """
    Map an ASCII letter through `index_map(0..25) -> 0..25`, preserving case.

    Non-letters are returned unchanged.
    """
    if "A" <= char <= "Z":
        return chr(index_map(ord(char) - 65) + 65)
    if "a" <= char <= "z":
        return chr(index_map(ord(char) - 97) + 97)
    return char


class CipherCodec(ABC):
    """
    Abstract base class for cipher codecs.

    Adding a cipher kind means writing one subclass and adding one
    registry entry; call sites never switch on the kind.
    """

    kind: CipherKind
    name: str = ""
    description: str = ""

    def check_config(self, config: CipherConfig) -> None:
        """Raise CipherConfigError if the config is unusable for this kind."""
        return None

    def with_defaults(self, config: CipherConfig | None) -> CipherConfig:
        """Fill in defaults for missing parameters, then check the result."""
        config = config or CipherConfig()
        self.check_config(config)
        return config

    @abstractmethod
    def encode(self, plaintext: str, config: CipherConfig) -> str:
        """Transform plaintext into ciphertext."""
        pass

    @abstractmethod
    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        """Invert encode."""
        pass

    def normalize(self, text: str, config: CipherConfig) -> str:
        """What decode(encode(text)) yields; identity for lossless codecs."""
        return text

    def validate(self, attempt: str, puzzle: Puzzle) -> bool:
        """
        Check an attempt against the puzzle's stored solution.

        The stored solution is authoritative: ciphertext is never
        re-decoded here.
        """
        normalized = normalize_answer(attempt)
        if not normalized:
            return False
        return normalized == normalize_answer(puzzle.solution)

    def _require(self, condition: bool, message: str) -> None:
        if not condition:
            raise CipherConfigError(f"{self.kind.value}: {message}")
