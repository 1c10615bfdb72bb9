"""
Tokenizer turning JSON text into a flat, positioned token sequence.

Every scanner is a pure function of ``(text, cursor)`` returning the token it
found together with the cursor just past it, so no scanning state outlives a
single call.
"""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ._errors import InvalidEscape
from ._errors import InvalidNumberFormat
from ._errors import InvalidNumberValue
from ._errors import UnexpectedCharacter
from ._errors import UnterminatedString
from ._profile import ProfileContext
from ._types import Position

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Lexical categories produced by the tokenizer."""

    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COLON = ":"
    COMMA = ","
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True, slots=True)
class Token:
    """
    A classified lexical unit.

    ``value`` holds the decoded payload (the unescaped string, the converted
    number, the boolean) and ``position`` the index of its first character.
    """

    type: TokenType
    value: Any
    position: Position


_STRUCTURAL = {
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
}

_LITERALS = (
    ("true", TokenType.BOOLEAN, True),
    ("false", TokenType.BOOLEAN, False),
    ("null", TokenType.NULL, None),
)

_NAMED_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_WHITESPACE = re.compile(r"[ \t\n\r]*")
# Plain run of characters up to the next quote, backslash or control character
_STRING_CHUNK = re.compile(r'([^"\\\x00-\x1f]*)(["\\\x00-\x1f])')
_NUMBER_RUN = re.compile(r"[-0-9.eE+]+")
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_NUMBER_START = frozenset("-0123456789")


def skip_whitespace(text: str, cursor: Position) -> Position:
    """Returns the cursor advanced past any JSON whitespace."""
    match = _WHITESPACE.match(text, cursor)
    return match.end() if match else cursor


def _decode_hex_escape(text: str, pos: Position) -> int:
    """Decodes the ``\\uXXXX`` escape whose backslash sits at ``pos``."""
    digits = text[pos + 2 : pos + 6]
    if len(digits) != 4 or not _HEX_DIGITS.issuperset(digits):
        raise InvalidEscape(
            f"Invalid \\uXXXX escape: {text[pos : pos + 6]!r}", text, pos
        )
    return int(digits, 16)


def _scan_escape(
    text: str, pos: Position, start: Position
) -> tuple[str, Position]:
    """Decodes the escape sequence at ``pos`` and returns the new cursor."""
    if pos + 1 >= len(text):
        raise UnterminatedString(
            "Unterminated string starting at", text, start
        )

    esc = text[pos + 1]
    if esc in _NAMED_ESCAPES:
        return _NAMED_ESCAPES[esc], pos + 2
    if esc != "u":
        raise InvalidEscape(f"Invalid \\escape: {esc!r}", text, pos)

    unit = _decode_hex_escape(text, pos)
    cursor = pos + 6

    # A high surrogate directly followed by a low surrogate is one code point
    if 0xD800 <= unit <= 0xDBFF and text.startswith("\\u", cursor):
        low = _decode_hex_escape(text, cursor)
        if 0xDC00 <= low <= 0xDFFF:
            unit = 0x10000 + (((unit - 0xD800) << 10) | (low - 0xDC00))
            cursor += 6

    return chr(unit), cursor


def scan_string(text: str, cursor: Position) -> tuple[Token, Position]:
    """Scans the string whose opening quote sits at ``cursor``."""
    with ProfileContext("scan_string"):
        start = cursor
        cursor += 1
        chunks: list[str] = []

        while True:
            match = _STRING_CHUNK.match(text, cursor)
            if match is None:
                raise UnterminatedString(
                    "Unterminated string starting at", text, start
                )

            content, terminator = match.groups()
            if content:
                chunks.append(content)
            cursor = match.end()

            if terminator == '"':
                break
            if terminator != "\\":
                raise UnexpectedCharacter(
                    terminator,
                    text,
                    cursor - 1,
                    msg="Invalid control character in string",
                )

            char, cursor = _scan_escape(text, cursor - 1, start)
            chunks.append(char)

        return Token(TokenType.STRING, "".join(chunks), start), cursor


def scan_number(text: str, cursor: Position) -> tuple[Token, Position]:
    """
    Scans the number starting at ``cursor``.

    The whole run of number-like characters is captured first and then
    validated against the strict JSON grammar, so ``013`` or ``1-2`` fail as
    a unit rather than splitting into several tokens.
    """
    with ProfileContext("scan_number"):
        run = _NUMBER_RUN.match(text, cursor)
        end = run.end() if run else cursor
        literal = text[cursor:end]

        match = _NUMBER.fullmatch(literal)
        if match is None:
            raise InvalidNumberFormat(
                f"Invalid number {literal!r}", text, cursor
            )

        fraction, exponent = match.groups()
        if fraction is None and exponent is None:
            try:
                value: int | float = int(literal)
            except ValueError as e:
                # Exceeds the interpreter's integer string conversion limit
                raise InvalidNumberValue(
                    "Number too large", text, cursor
                ) from e
        else:
            value = float(literal)
            if math.isinf(value):
                raise InvalidNumberValue(
                    f"Number out of range: {literal!r}", text, cursor
                )

        return Token(TokenType.NUMBER, value, cursor), end


def scan_literal(text: str, cursor: Position) -> tuple[Token, Position]:
    """Scans ``true``, ``false`` or ``null`` by exact match at ``cursor``."""
    for word, token_type, value in _LITERALS:
        if text.startswith(word, cursor):
            return Token(token_type, value, cursor), cursor + len(word)

    raise UnexpectedCharacter(text[cursor], text, cursor)


def next_token(text: str, cursor: Position) -> tuple[Token, Position]:
    """Scans the single token starting at ``cursor`` (no leading whitespace)."""
    char = text[cursor]

    token_type = _STRUCTURAL.get(char)
    if token_type is not None:
        return Token(token_type, char, cursor), cursor + 1

    if char == '"':
        return scan_string(text, cursor)
    elif char in _NUMBER_START:
        return scan_number(text, cursor)
    elif char in "tfn":
        return scan_literal(text, cursor)
    elif char == "\ufeff":
        raise UnexpectedCharacter(
            char,
            text,
            cursor,
            msg="JSON input should not contain BOM (Byte Order Mark)",
        )
    else:
        raise UnexpectedCharacter(char, text, cursor)


def tokenize(text: str) -> list[Token]:
    """
    Splits JSON text into its complete token sequence.

    Whitespace is dropped; every other character belongs to exactly one
    token or raises a ``TokenizeError`` positioned at the offending
    character.
    """
    with ProfileContext("tokenize", len(text)):
        tokens: list[Token] = []
        length = len(text)
        cursor = skip_whitespace(text, 0)

        while cursor < length:
            token, cursor = next_token(text, cursor)
            tokens.append(token)
            cursor = skip_whitespace(text, cursor)

    logger.debug("Tokenized %d characters into %d tokens", length, len(tokens))
    return tokens
