"""Caesar cipher - shift each letter a fixed number of places."""

from __future__ import annotations

from .base import CipherCodec, CipherConfig, CipherKind, map_letter

DEFAULT_SHIFT = 3


def shift_text(text: str, shift: int) -> str:
    """Shift ASCII letters cyclically within their case's alphabet."""
    shift %= 26
    return "".join(map_letter(char, lambda i: (i + shift) % 26) for char in text)


class CaesarCodec(CipherCodec):
    kind = CipherKind.CAESAR
    name = "Caesar Cipher"
    description = "Shifts letters by a fixed number."

    def check_config(self, config: CipherConfig) -> None:
        shift = config.shift
        self._require(
            isinstance(shift, int) and not isinstance(shift, bool),
            f"shift must be an integer, got {shift!r}",
        )
        self._require(1 <= shift <= 25, f"shift must be between 1 and 25, got {shift}")

    def with_defaults(self, config: CipherConfig | None) -> CipherConfig:
        config = config or CipherConfig()
        if config.shift is None:
            config = config.with_values(shift=DEFAULT_SHIFT)
        self.check_config(config)
        return config

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        self.check_config(config)
        return shift_text(plaintext, config.shift)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        self.check_config(config)
        return shift_text(ciphertext, 26 - (config.shift % 26))
