"""
Ciphers - Reversible puzzle transforms.

Nine deliberately weak ciphers sharing one codec interface:
- caesar, atbash, substitution, transposition
- morse, binary, mirror
- anagram and riddle, which are verified rather than decoded
"""

from .base import CipherKind, CipherConfig, CipherCodec, normalize_answer
from .substitution import generate_substitution_key
from .registry import (
    CIPHER_REGISTRY,
    get_codec,
    encode_text,
    decode_text,
    validate_solution,
    cipher_info,
)

__all__ = [
    "CipherKind",
    "CipherConfig",
    "CipherCodec",
    "normalize_answer",
    "generate_substitution_key",
    "CIPHER_REGISTRY",
    "get_codec",
    "encode_text",
    "decode_text",
    "validate_solution",
    "cipher_info",
]
