"""
Serializer turning a value tree into JSON text.

Containers are written from an explicit frame stack, so deeply nested input
cannot exhaust the interpreter's recursion limit. Objects keep their
insertion order; keys are never sorted.
"""

import logging
import math
import re
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Any

from ._errors import CircularReference
from ._errors import NonFiniteNumber
from ._errors import SerializeError
from ._errors import UnsupportedValueType
from ._profile import ProfileContext
from ._timestamps import format_timestamp
from ._types import OMIT
from ._types import DateSerializer
from ._types import HookKey
from ._types import Replacer

logger = logging.getLogger(__name__)

MAX_INDENT = 10

_ESCAPE = re.compile(r'[\x00-\x1f"\\]')
_ESCAPE_MAP = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
for _code in range(0x20):
    _ESCAPE_MAP.setdefault(chr(_code), f"\\u{_code:04x}")
del _code


def normalize_indent(space: str | int | None) -> str:
    """
    Resolves the ``space`` option into the indent unit for one level.

    Counts are clamped to ``[0, 10]`` spaces and strings truncated to 10
    characters; an empty result means compact single-line output.
    """
    if space is None:
        return ""
    if isinstance(space, bool) or not isinstance(space, int | str):
        msg = f"space must be an int, str or None, not {type(space).__name__}"
        raise TypeError(msg)
    if isinstance(space, int):
        return " " * min(max(space, 0), MAX_INDENT)
    return space[:MAX_INDENT]


@dataclass(frozen=True)
class EncodeConfig:
    """
    Configures JSON encoding behavior with immutable settings.

    ``replacer`` transforms each value before it is written, ``space``
    selects the indentation (see ``normalize_indent``) and
    ``date_serializer`` renders ``datetime`` values as strings.
    """

    replacer: Replacer = None
    space: str | int | None = None
    date_serializer: DateSerializer = format_timestamp
    indent: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.replacer is not None and not callable(self.replacer):
            raise TypeError("replacer must be callable")
        if not callable(self.date_serializer):
            raise TypeError("date_serializer must be callable")
        object.__setattr__(self, "indent", normalize_indent(self.space))


_DEFAULT_CONFIG = EncodeConfig()


def _replace_escape(match: re.Match[str]) -> str:
    return _ESCAPE_MAP[match.group(0)]


def encode_string(s: str) -> str:
    """Quotes a string, escaping quotes, backslashes and control characters."""
    return '"' + _ESCAPE.sub(_replace_escape, s) + '"'


def encode_number(n: int | float) -> str:
    """Encode numeric values with JSON compliance."""
    if isinstance(n, float):
        if not math.isfinite(n):
            msg = f"Out of range float values are not JSON compliant: {n!r}"
            raise NonFiniteNumber(msg)
        return float.__repr__(n)
    try:
        return int.__repr__(n)
    except ValueError as e:
        # Exceeds the interpreter's integer string conversion limit
        msg = f"Integer too large to serialize ({n.bit_length()} bits)"
        raise UnsupportedValueType(msg) from e


def _encode_leaf(value: Any, config: EncodeConfig) -> str:  # noqa: PLR0911
    """Encodes anything that is not a non-empty container."""
    if value is None:
        return "null"
    elif value is True:
        return "true"
    elif value is False:
        return "false"
    elif isinstance(value, str):
        return encode_string(value)
    elif isinstance(value, int | float):
        return encode_number(value)
    elif isinstance(value, datetime):
        text = config.date_serializer(value)
        if not isinstance(text, str):
            msg = (
                "date_serializer must return str, "
                f"not {type(text).__name__}"
            )
            raise UnsupportedValueType(msg)
        return encode_string(text)
    elif isinstance(value, dict):
        return "{}"
    elif isinstance(value, list | tuple):
        return "[]"
    else:
        msg = f"Object of type {type(value).__name__} is not JSON serializable"
        raise UnsupportedValueType(msg)


@dataclass
class _EncodeFrame:
    """An open container being written member by member."""

    members: Iterator[tuple[HookKey, Any]]
    is_object: bool
    level: int
    marker: int
    count: int = 0
    key: HookKey = ""


_END = object()


def _next_member(
    frame: _EncodeFrame, config: EncodeConfig, chunks: list[str]
) -> Any:
    """
    Writes the separator and key for the next member and returns its value.

    Returns ``_END`` once the container is exhausted. Object members the
    replacer omits are skipped entirely; omitted array elements become null.
    """
    for key, item in frame.members:
        if frame.is_object and not isinstance(key, str):
            msg = f"keys must be str, not {type(key).__name__}"
            raise UnsupportedValueType(msg)

        frame.key = key
        if config.replacer is not None:
            item = config.replacer(key, item)
            if item is OMIT:
                if frame.is_object:
                    continue
                item = None

        if frame.count:
            chunks.append(",")
        if config.indent:
            chunks.append("\n" + config.indent * (frame.level + 1))
        if frame.is_object:
            chunks.append(encode_string(key))  # type: ignore[arg-type]
            chunks.append(": " if config.indent else ":")
        frame.count += 1
        return item

    return _END


def _describe_path(stack: list[_EncodeFrame]) -> str:
    return "".join(f"[{frame.key!r}]" for frame in stack)


def encode(value: Any, config: EncodeConfig | None = None) -> str:
    """
    Serializes a value tree into JSON text.

    The replacer, when configured, sees every value before it is written:
    first the root under the key ``""``, then each member of every container
    it returns. Raises a ``SerializeError`` for unsupported values,
    non-finite floats and self-containing containers.
    """
    config = config or _DEFAULT_CONFIG
    logger.debug(
        "Encoding %s output", "indented" if config.indent else "compact"
    )

    if config.replacer is not None:
        value = config.replacer("", value)
        if value is OMIT:
            value = None

    chunks: list[str] = []
    stack: list[_EncodeFrame] = []
    markers: set[int] = set()

    with ProfileContext("encode"):
        try:
            while True:
                if isinstance(value, dict | list | tuple) and value:
                    marker = id(value)
                    if marker in markers:
                        raise CircularReference("Circular reference detected")
                    markers.add(marker)

                    is_object = isinstance(value, dict)
                    members = (
                        iter(value.items())  # type: ignore[union-attr]
                        if is_object
                        else enumerate(value)
                    )
                    stack.append(
                        _EncodeFrame(members, is_object, len(stack), marker)
                    )
                    chunks.append("{" if is_object else "[")
                else:
                    chunks.append(_encode_leaf(value, config))

                # Move on to the next pending member, closing exhausted frames
                while stack:
                    frame = stack[-1]
                    member = _next_member(frame, config, chunks)
                    if member is not _END:
                        value = member
                        break

                    stack.pop()
                    markers.discard(frame.marker)
                    if config.indent and frame.count:
                        chunks.append("\n" + config.indent * frame.level)
                    chunks.append("}" if frame.is_object else "]")
                else:
                    return "".join(chunks)
        except SerializeError as e:
            if stack:
                e.add_note(f"while serializing {_describe_path(stack)}")
            raise
