"""
Strict JSON text codec with transform hooks and timestamp support.

``parse`` turns JSON text into plain Python values and ``stringify`` turns
them back into text. Both accept per-key transform hooks (``reviver`` and
``replacer``) and pluggable conversions for ``datetime`` values, whose wire
form is an ISO-8601 string.
"""

import logging
from typing import IO
from typing import Any

from ._encoder import MAX_INDENT
from ._encoder import EncodeConfig
from ._encoder import encode
from ._encoder import encode_number
from ._encoder import encode_string
from ._encoder import normalize_indent
from ._errors import CircularReference
from ._errors import ExpectedColon
from ._errors import ExpectedCommaOrBrace
from ._errors import ExpectedCommaOrBracket
from ._errors import InvalidEscape
from ._errors import InvalidNumberFormat
from ._errors import InvalidNumberValue
from ._errors import InvalidObjectKey
from ._errors import JSONDecodeError
from ._errors import NestingTooDeep
from ._errors import NonFiniteNumber
from ._errors import ParseError
from ._errors import SerializeError
from ._errors import TokenizeError
from ._errors import TrailingData
from ._errors import UnexpectedCharacter
from ._errors import UnexpectedToken
from ._errors import UnsupportedValueType
from ._errors import UnterminatedArray
from ._errors import UnterminatedObject
from ._errors import UnterminatedString
from ._parser import DEFAULT_MAX_DEPTH
from ._parser import ParseConfig
from ._parser import parse_tokens
from ._parser import parse_value
from ._parser import revive
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import get_hot_path_stats
from ._timestamps import format_timestamp
from ._timestamps import parse_timestamp
from ._tokens import Token
from ._tokens import TokenType
from ._tokens import tokenize
from ._types import OMIT
from ._types import JsonValue
from ._types import Position

__version__ = "0.1.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def parse(text: str, **kwargs: Any) -> JsonValue:
    """
    Parses JSON text into Python values with strict standards compliance.

    Keyword arguments build a ``ParseConfig`` (``reviver``, ``date_parser``,
    ``max_depth``). Raises a ``JSONDecodeError`` subclass positioned at the
    offending character for malformed input.
    """
    if not isinstance(text, str):
        raise TypeError(
            f"the JSON object must be str, not {type(text).__name__}"
        )

    config = ParseConfig(**kwargs)
    tokens = tokenize(text)
    return parse_tokens(tokens, doc=text, config=config)


def stringify(value: Any, **kwargs: Any) -> str:
    """
    Serializes Python values to JSON text with configurable formatting.

    Keyword arguments build an ``EncodeConfig`` (``replacer``, ``space``,
    ``date_serializer``).
    """
    config = EncodeConfig(**kwargs)
    return encode(value, config)


def load(fp: IO[str], **kwargs: Any) -> JsonValue:
    """Parses the whole content of a readable text stream."""
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    return parse(fp.read(), **kwargs)


def dump(value: Any, fp: IO[str], **kwargs: Any) -> None:
    """Serializes ``value`` and writes the text to a writable stream."""
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(stringify(value, **kwargs))


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "MAX_INDENT",
    "OMIT",
    "CircularReference",
    "EncodeConfig",
    "ExpectedColon",
    "ExpectedCommaOrBrace",
    "ExpectedCommaOrBracket",
    "HotPathStats",
    "InvalidEscape",
    "InvalidNumberFormat",
    "InvalidNumberValue",
    "InvalidObjectKey",
    "JSONDecodeError",
    "JsonValue",
    "NestingTooDeep",
    "NonFiniteNumber",
    "ParseConfig",
    "ParseError",
    "Position",
    "SerializeError",
    "Token",
    "TokenType",
    "TokenizeError",
    "TrailingData",
    "UnexpectedCharacter",
    "UnexpectedToken",
    "UnsupportedValueType",
    "UnterminatedArray",
    "UnterminatedObject",
    "UnterminatedString",
    "clear_hot_path_stats",
    "dump",
    "encode",
    "encode_number",
    "encode_string",
    "format_timestamp",
    "get_hot_path_stats",
    "load",
    "normalize_indent",
    "parse",
    "parse_timestamp",
    "parse_tokens",
    "parse_value",
    "revive",
    "stringify",
    "tokenize",
]
