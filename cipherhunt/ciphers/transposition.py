"""
Columnar transposition - write rows, read columns.

Encode strips whitespace, writes the text row-major into a grid of
`key` columns and reads it out column-major. When the text length is
not a multiple of `key`, the final row is incomplete: only its first
`len % key` columns hold a character. Decode rebuilds exactly that
shape before reading the rows back.

    MEETMEATTHEPARK, key=4          M E E T
                                    M E A T
    -> MMTA EEHR EAEK TTP           T H E P
                                    A R K
"""

from __future__ import annotations

from .base import CipherCodec, CipherConfig, CipherKind, strip_whitespace

DEFAULT_COLUMNS = 5


def column_count(config: CipherConfig) -> int:
    key = config.key
    if isinstance(key, str):
        return int(key.strip())
    return key


def column_heights(length: int, columns: int) -> list[int]:
    """
    Number of characters each column receives during encode.

    The first `length % columns` columns get a character from the
    incomplete last row; the rest stop one row short. If the length
    divides evenly, every column is full.
    """
    rows = -(-length // columns)
    full_columns = length % columns or columns
    return [rows if col < full_columns else rows - 1 for col in range(columns)]


def transpose(text: str, columns: int) -> str:
    clean = strip_whitespace(text)
    return "".join(clean[col::columns] for col in range(columns))


def untranspose(text: str, columns: int) -> str:
    clean = strip_whitespace(text)
    if not clean:
        return ""
    heights = column_heights(len(clean), columns)
    column_texts = []
    position = 0
    for height in heights:
        column_texts.append(clean[position:position + height])
        position += height

    rows = heights[0]
    out = []
    for row in range(rows):
        for column_text in column_texts:
            if row < len(column_text):
                out.append(column_text[row])
    return "".join(out)


class TranspositionCodec(CipherCodec):
    kind = CipherKind.TRANSPOSITION
    name = "Transposition Cipher"
    description = "Letters are rearranged."

    def check_config(self, config: CipherConfig) -> None:
        key = config.key
        self._require(
            not isinstance(key, bool) and isinstance(key, (int, str)),
            f"key must be a column count, got {key!r}",
        )
        if isinstance(key, str):
            self._require(key.strip().isdigit(), f"key must be a column count, got {key!r}")
        self._require(column_count(config) >= 2, f"key must be at least 2 columns, got {key}")

    def with_defaults(self, config: CipherConfig | None) -> CipherConfig:
        config = config or CipherConfig()
        if config.key is None:
            config = config.with_values(key=DEFAULT_COLUMNS)
        self.check_config(config)
        return config.with_values(key=column_count(config))

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        self.check_config(config)
        return transpose(plaintext, column_count(config))

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        self.check_config(config)
        return untranspose(ciphertext, column_count(config))

    def normalize(self, text: str, config: CipherConfig) -> str:
        return strip_whitespace(text)
