"""
Exception hierarchy for tokenizing, parsing and serializing.

Decode failures carry the offending position in the source document along
with the derived line and column. Serialization failures operate on
in-memory data and carry no position.
"""

from ._types import Position


class JSONDecodeError(ValueError):
    """
    Handles JSON parsing failures with precise position and context information.

    Error state containing position, line/column numbers, and the source
    document to help users identify and fix JSON syntax issues.
    """

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, str, Position]]:
        return self.__class__, (self.msg, self.doc, self.pos)


class TokenizeError(JSONDecodeError):
    """Lexical failure: malformed characters, escapes or numbers."""


class UnexpectedCharacter(TokenizeError):
    """A character that cannot start any token, or a raw control character."""

    def __init__(
        self,
        char: str,
        doc: str = "",
        pos: Position = 0,
        msg: str | None = None,
    ) -> None:
        self.char = char
        super().__init__(msg or f"Unexpected character {char!r}", doc, pos)

    def __reduce__(  # type: ignore[override]
        self,
    ) -> tuple[type, tuple[str, str, Position, str]]:
        return self.__class__, (self.char, self.doc, self.pos, self.msg)


class UnterminatedString(TokenizeError):
    pass


class InvalidEscape(TokenizeError):
    pass


class InvalidNumberFormat(TokenizeError):
    pass


class InvalidNumberValue(TokenizeError):
    pass


class ParseError(JSONDecodeError):
    """Structural failure: misplaced tokens or unbalanced containers."""


class UnexpectedToken(ParseError):
    pass


class InvalidObjectKey(ParseError):
    pass


class ExpectedColon(ParseError):
    pass


class ExpectedCommaOrBrace(ParseError):
    pass


class ExpectedCommaOrBracket(ParseError):
    pass


class UnterminatedObject(ParseError):
    """Token stream ended inside an object; positioned at its ``{``."""


class UnterminatedArray(ParseError):
    """Token stream ended inside an array; positioned at its ``[``."""


class TrailingData(ParseError):
    pass


class NestingTooDeep(ParseError):
    pass


class SerializeError(ValueError):
    """Base class for failures while turning a value tree into text."""


class UnsupportedValueType(SerializeError, TypeError):
    pass


class NonFiniteNumber(SerializeError):
    pass


class CircularReference(SerializeError):
    pass
