"""Binary code - each character as its 8-bit code, space separated."""

from __future__ import annotations

from ..errors import CipherInputError
from .base import CipherCodec, CipherConfig, CipherKind

MAX_CODE = 255


def text_to_binary(text: str) -> str:
    groups = []
    for char in text:
        code = ord(char)
        if code > MAX_CODE:
            raise CipherInputError(f"binary: character {char!r} is outside the 0-255 range")
        groups.append(format(code, "08b"))
    return " ".join(groups)


def binary_to_text(binary: str) -> str:
    chars = []
    for group in binary.split():
        if set(group) - {"0", "1"}:
            raise CipherInputError(f"binary: {group!r} is not a binary number")
        code = int(group, 2)
        if code > MAX_CODE:
            raise CipherInputError(f"binary: {group!r} is outside the 0-255 range")
        chars.append(chr(code))
    return "".join(chars)


class BinaryCodec(CipherCodec):
    kind = CipherKind.BINARY
    name = "Binary Code"
    description = "Text encoded as sequences of 0s and 1s."

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        return text_to_binary(plaintext)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        return binary_to_text(ciphertext)
