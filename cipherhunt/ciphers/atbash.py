"""Atbash cipher - reflect each letter across the alphabet (A<->Z)."""

from __future__ import annotations

from .base import CipherCodec, CipherConfig, CipherKind, map_letter


def atbash(text: str) -> str:
    """Self-inverse: atbash(atbash(text)) == text."""
    return "".join(map_letter(char, lambda i: 25 - i) for char in text)


class AtbashCodec(CipherCodec):
    kind = CipherKind.ATBASH
    name = "Atbash Cipher"
    description = "Reverses the alphabet (A=Z, B=Y)."

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        return atbash(plaintext)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        return atbash(ciphertext)
