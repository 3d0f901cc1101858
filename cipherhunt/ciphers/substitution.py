"""
Substitution cipher - map each letter through a 26-letter permutation key.

The key is written as the cipher alphabet: key[0] replaces A, key[1]
replaces B, and so on. Case is preserved.
"""

from __future__ import annotations
import random

from .base import ALPHABET, CipherCodec, CipherConfig, CipherKind, map_letter


def generate_substitution_key(rng: random.Random | None = None) -> str:
    """Return a uniformly random permutation of A-Z (Fisher-Yates shuffle)."""
    rng = rng or random.Random()
    letters = list(ALPHABET)
    for i in range(len(letters) - 1, 0, -1):
        j = rng.randint(0, i)
        letters[i], letters[j] = letters[j], letters[i]
    return "".join(letters)


def is_valid_key(key: object) -> bool:
    return (
        isinstance(key, str)
        and len(key) == 26
        and set(key.upper()) == set(ALPHABET)
    )


class SubstitutionCodec(CipherCodec):
    kind = CipherKind.SUBSTITUTION
    name = "Simple Substitution"
    description = "Each letter is replaced by another."

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng

    def check_config(self, config: CipherConfig) -> None:
        key = config.key
        self._require(isinstance(key, str), f"key must be a 26-letter string, got {key!r}")
        self._require(len(key) == 26, f"key must have 26 letters, got {len(key)}")
        self._require(
            set(key.upper()) == set(ALPHABET),
            "key must use every letter A-Z exactly once",
        )

    def with_defaults(self, config: CipherConfig | None) -> CipherConfig:
        config = config or CipherConfig()
        if config.key is None:
            config = config.with_values(key=generate_substitution_key(self._rng))
        elif isinstance(config.key, str):
            config = config.with_values(key=config.key.upper())
        self.check_config(config)
        return config

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        self.check_config(config)
        key = config.key.upper()
        return "".join(map_letter(char, lambda i: ord(key[i]) - 65) for char in plaintext)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        self.check_config(config)
        key = config.key.upper()
        inverse = {ord(letter) - 65: index for index, letter in enumerate(key)}
        return "".join(map_letter(char, lambda i: inverse[i]) for char in ciphertext)
