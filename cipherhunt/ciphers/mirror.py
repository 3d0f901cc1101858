"""
Mirror writing - reverse the text.

The advanced variant also swaps visually mirrored letters before
reversing. Decode applies the inverse of the swap table after
un-reversing, so it stays correct if the table ever stops being
symmetric.
"""

from __future__ import annotations

from .base import CipherCodec, CipherConfig, CipherKind

MIRROR_SWAPS: dict[str, str] = {
    "b": "d", "d": "b",
    "p": "q", "q": "p",
    "n": "u", "u": "n",
}

_UNSWAPS: dict[str, str] = {mirrored: original for original, mirrored in MIRROR_SWAPS.items()}


def mirror_text(text: str) -> str:
    return text[::-1]


def mirror_text_advanced(text: str) -> str:
    return "".join(MIRROR_SWAPS.get(char, char) for char in text)[::-1]


def unmirror_text_advanced(text: str) -> str:
    return "".join(_UNSWAPS.get(char, char) for char in text[::-1])


class MirrorCodec(CipherCodec):
    kind = CipherKind.MIRROR
    name = "Mirror Writing"
    description = "Text is reversed, like in a mirror."

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        if config.advanced:
            return mirror_text_advanced(plaintext)
        return mirror_text(plaintext)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        if config.advanced:
            return unmirror_text_advanced(ciphertext)
        return mirror_text(ciphertext)
