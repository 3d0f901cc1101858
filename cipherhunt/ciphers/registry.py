"""
Cipher Registry - one codec per cipher kind.

Call sites dispatch through this table and never switch on the kind.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

from .anagram import AnagramCodec
from .atbash import AtbashCodec
from .base import CipherCodec, CipherConfig, CipherKind
from .binary import BinaryCodec
from .caesar import CaesarCodec
from .mirror import MirrorCodec
from .morse import MorseCodec
from .riddle import RiddleCodec
from .substitution import SubstitutionCodec
from .transposition import TranspositionCodec

if TYPE_CHECKING:
    from ..story_graph.puzzle import Puzzle


CIPHER_REGISTRY: dict[CipherKind, CipherCodec] = {
    codec.kind: codec
    for codec in (
        CaesarCodec(),
        AtbashCodec(),
        SubstitutionCodec(),
        TranspositionCodec(),
        AnagramCodec(),
        MirrorCodec(),
        RiddleCodec(),
        BinaryCodec(),
        MorseCodec(),
    )
}


def get_codec(kind: CipherKind | str) -> CipherCodec:
    """Look up the codec for a kind. Raises ValueError for unknown kinds."""
    return CIPHER_REGISTRY[CipherKind(kind)]


def _config(config: CipherConfig | dict | None) -> CipherConfig:
    if isinstance(config, CipherConfig):
        return config
    return CipherConfig.from_dict(config)


def encode_text(kind: CipherKind | str, plaintext: str, config: CipherConfig | dict | None = None) -> str:
    codec = get_codec(kind)
    return codec.encode(plaintext, codec.with_defaults(_config(config)))


def decode_text(kind: CipherKind | str, ciphertext: str, config: CipherConfig | dict | None = None) -> str:
    codec = get_codec(kind)
    return codec.decode(ciphertext, codec.with_defaults(_config(config)))


def validate_solution(attempt: str, puzzle: Puzzle) -> bool:
    return get_codec(puzzle.cipher_kind).validate(attempt, puzzle)


def cipher_info() -> list[dict[str, Any]]:
    """Display metadata for every registered kind, in enumeration order."""
    return [
        {
            "kind": kind.value,
            "name": CIPHER_REGISTRY[kind].name,
            "description": CIPHER_REGISTRY[kind].description,
        }
        for kind in CipherKind
    ]
