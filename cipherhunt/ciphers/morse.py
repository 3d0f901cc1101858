"""
Morse code - dots and dashes.

Letters within a word are joined by a single space; words are joined
by " / ". Characters outside the table pass through as their own token.
"""

from __future__ import annotations

from .base import CipherCodec, CipherConfig, CipherKind, collapse_whitespace

MORSE_CODE: dict[str, str] = {
    "A": ".-", "B": "-...", "C": "-.-.", "D": "-..", "E": ".", "F": "..-.",
    "G": "--.", "H": "....", "I": "..", "J": ".---", "K": "-.-", "L": ".-..",
    "M": "--", "N": "-.", "O": "---", "P": ".--.", "Q": "--.-", "R": ".-.",
    "S": "...", "T": "-", "U": "..-", "V": "...-", "W": ".--", "X": "-..-",
    "Y": "-.--", "Z": "--..",
    "0": "-----", "1": ".----", "2": "..---", "3": "...--", "4": "....-",
    "5": ".....", "6": "-....", "7": "--...", "8": "---..", "9": "----.",
    ".": ".-.-.-", ",": "--..--", "?": "..--..", "'": ".----.", "!": "-.-.--",
    "/": "-..-.", "(": "-.--.", ")": "-.--.-", "&": ".-...", ":": "---...",
    ";": "-.-.-.", "=": "-...-", "+": ".-.-.", "-": "-....-", "_": "..--.-",
    '"': ".-..-.", "$": "...-..-", "@": ".--.-.",
}

REVERSE_MORSE_CODE: dict[str, str] = {code: char for char, code in MORSE_CODE.items()}

WORD_SEPARATOR = "/"


def text_to_morse(text: str) -> str:
    words = text.upper().split()
    return f" {WORD_SEPARATOR} ".join(
        " ".join(MORSE_CODE.get(char, char) for char in word)
        for word in words
    )


def morse_to_text(morse: str) -> str:
    words: list[str] = []
    current: list[str] = []
    for token in morse.split():
        if token == WORD_SEPARATOR:
            words.append("".join(current))
            current = []
        else:
            current.append(REVERSE_MORSE_CODE.get(token, token))
    words.append("".join(current))
    return " ".join(word for word in words if word)


class MorseCodec(CipherCodec):
    kind = CipherKind.MORSE
    name = "Morse Code"
    description = "Text encoded as dots and dashes."

    def encode(self, plaintext: str, config: CipherConfig) -> str:
        return text_to_morse(plaintext)

    def decode(self, ciphertext: str, config: CipherConfig) -> str:
        return morse_to_text(ciphertext)

    def normalize(self, text: str, config: CipherConfig) -> str:
        return collapse_whitespace(text.upper())
