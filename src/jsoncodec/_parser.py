"""
Parser building a value tree from a token sequence.

Containers are tracked on an explicit frame stack instead of native
recursion, so nesting is bounded only by ``ParseConfig.max_depth``. The
optional reviver pass walks the finished tree the same way.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from typing import Any

from ._errors import ExpectedColon
from ._errors import ExpectedCommaOrBrace
from ._errors import ExpectedCommaOrBracket
from ._errors import InvalidObjectKey
from ._errors import NestingTooDeep
from ._errors import ParseError
from ._errors import TrailingData
from ._errors import UnexpectedToken
from ._errors import UnterminatedArray
from ._errors import UnterminatedObject
from ._profile import ProfileContext
from ._tokens import Token
from ._tokens import TokenType
from ._types import OMIT
from ._types import DateParser
from ._types import HookKey
from ._types import JsonValue
from ._types import Position
from ._types import Reviver

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 512

_SCALARS = frozenset(
    (TokenType.STRING, TokenType.NUMBER, TokenType.BOOLEAN, TokenType.NULL)
)


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSON parsing behavior with immutable settings.

    ``reviver`` transforms the finished tree per key, ``date_parser`` may
    turn string values into timestamps while the tree is built, and
    ``max_depth`` bounds container nesting (``None`` disables the bound).
    """

    reviver: Reviver = None
    date_parser: DateParser = None
    max_depth: int | None = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.reviver is not None and not callable(self.reviver):
            raise TypeError("reviver must be callable")
        if self.date_parser is not None and not callable(self.date_parser):
            raise TypeError("date_parser must be callable")
        if self.max_depth is not None:
            if not isinstance(self.max_depth, int) or isinstance(
                self.max_depth, bool
            ):
                raise TypeError("max_depth must be an integer or None")
            if self.max_depth < 0:
                raise ValueError("max_depth must be non-negative")


_DEFAULT_CONFIG = ParseConfig()


@dataclass
class _Frame:
    """An open container awaiting its next member."""

    opener: Token
    container: dict[str, Any] | list[Any]
    key: str = ""
    is_object: bool = field(init=False)

    def __post_init__(self) -> None:
        self.is_object = isinstance(self.container, dict)

    def unterminated(self, doc: str) -> ParseError:
        if self.is_object:
            return UnterminatedObject(
                "Unterminated object starting at", doc, self.opener.position
            )
        return UnterminatedArray(
            "Unterminated array starting at", doc, self.opener.position
        )


def _peek(tokens: Sequence[Token], cursor: Position) -> Token | None:
    return tokens[cursor] if cursor < len(tokens) else None


def _parse_object_key(
    tokens: Sequence[Token], cursor: Position, frame: _Frame, doc: str
) -> Position:
    """Reads ``"key" :`` into ``frame.key`` and returns the new cursor."""
    token = _peek(tokens, cursor)
    if token is None:
        raise frame.unterminated(doc)
    if token.type is not TokenType.STRING:
        raise InvalidObjectKey(
            "Expecting property name enclosed in double quotes",
            doc,
            token.position,
        )
    frame.key = token.value

    token = _peek(tokens, cursor + 1)
    if token is None:
        raise frame.unterminated(doc)
    if token.type is not TokenType.COLON:
        raise ExpectedColon("Expecting ':' delimiter", doc, token.position)
    return cursor + 2


def _scalar_value(token: Token, config: ParseConfig) -> JsonValue:
    if token.type is TokenType.STRING and config.date_parser is not None:
        timestamp = config.date_parser(token.value)
        if timestamp is not None:
            return timestamp
    return token.value


def parse_value(
    tokens: Sequence[Token],
    cursor: Position = 0,
    *,
    doc: str = "",
    config: ParseConfig | None = None,
) -> tuple[JsonValue, Position]:
    """
    Parses one JSON value starting at ``cursor``.

    Returns the value together with the cursor just past its last token;
    tokens beyond that are left untouched. ``doc`` is the source text, used
    only to give errors line and column information. The reviver is not
    applied here.
    """
    config = config or _DEFAULT_CONFIG
    max_depth = config.max_depth
    stack: list[_Frame] = []

    with ProfileContext("parse_value", len(tokens) - cursor):
        while True:
            # Expecting the start of a value
            token = _peek(tokens, cursor)
            if token is None:
                if stack:
                    raise stack[-1].unterminated(doc)
                raise UnexpectedToken("Expecting value", doc, len(doc))

            value: JsonValue
            if token.type in _SCALARS:
                value = _scalar_value(token, config)
                cursor += 1
            elif token.type in (TokenType.LEFT_BRACE, TokenType.LEFT_BRACKET):
                if max_depth is not None and len(stack) >= max_depth:
                    raise NestingTooDeep(
                        f"Maximum nesting depth of {max_depth} exceeded",
                        doc,
                        token.position,
                    )
                is_object = token.type is TokenType.LEFT_BRACE
                frame = _Frame(token, {} if is_object else [])
                closer = (
                    TokenType.RIGHT_BRACE
                    if is_object
                    else TokenType.RIGHT_BRACKET
                )
                cursor += 1

                following = _peek(tokens, cursor)
                if following is None:
                    raise frame.unterminated(doc)
                if following.type is closer:
                    value = frame.container
                    cursor += 1
                else:
                    stack.append(frame)
                    if is_object:
                        cursor = _parse_object_key(tokens, cursor, frame, doc)
                    continue
            else:
                raise UnexpectedToken("Expecting value", doc, token.position)

            # Attach the completed value and close every finished container
            while stack:
                frame = stack[-1]
                if frame.is_object:
                    # Duplicate keys overwrite in place, keeping first position
                    frame.container[frame.key] = value  # type: ignore[index]
                else:
                    frame.container.append(value)  # type: ignore[union-attr]

                token = _peek(tokens, cursor)
                if token is None:
                    raise frame.unterminated(doc)

                if token.type is TokenType.COMMA:
                    cursor += 1
                    if frame.is_object:
                        cursor = _parse_object_key(tokens, cursor, frame, doc)
                    break

                if frame.is_object:
                    if token.type is not TokenType.RIGHT_BRACE:
                        raise ExpectedCommaOrBrace(
                            "Expecting ',' delimiter", doc, token.position
                        )
                elif token.type is not TokenType.RIGHT_BRACKET:
                    raise ExpectedCommaOrBracket(
                        "Expecting ',' delimiter", doc, token.position
                    )

                cursor += 1
                value = stack.pop().container
            else:
                return value, cursor


def parse_tokens(
    tokens: Sequence[Token],
    *,
    doc: str = "",
    config: ParseConfig | None = None,
) -> JsonValue:
    """
    Parses a complete token sequence into a value tree.

    The sequence must hold exactly one value; leftover tokens raise
    ``TrailingData``. The configured reviver, if any, runs last.
    """
    config = config or _DEFAULT_CONFIG
    logger.debug(
        "Parsing %d tokens with max_depth=%s", len(tokens), config.max_depth
    )
    value, cursor = parse_value(tokens, doc=doc, config=config)

    if cursor < len(tokens):
        raise TrailingData("Extra data", doc, tokens[cursor].position)

    if config.reviver is not None:
        return revive(value, config.reviver)
    return value


def revive(value: JsonValue, reviver: Reviver) -> JsonValue:
    """
    Applies ``reviver(key, value)`` to every node, children before parents.

    The root is visited under the key ``""``; object members under their
    key and array elements under their original index. A parent is handed
    to the reviver only after its children were replaced by their results.
    Returning ``OMIT`` removes the slot from its container; an omitted root
    yields ``None``.
    """
    if reviver is None:
        return value

    logger.debug("Applying reviver %r", reviver)
    holder: dict[HookKey, Any] = {"": value}
    # (container, key, children_done)
    stack: list[tuple[Any, HookKey, bool]] = [(holder, "", False)]

    with ProfileContext("revive"):
        while stack:
            container, key, children_done = stack.pop()
            node = container[key]

            if not children_done and isinstance(node, dict | list) and node:
                stack.append((container, key, True))
                keys: Sequence[HookKey] = (
                    list(node) if isinstance(node, dict) else range(len(node))
                )
                for child_key in reversed(keys):
                    stack.append((node, child_key, False))
                continue

            if children_done:
                if isinstance(node, dict):
                    for child_key in [k for k, v in node.items() if v is OMIT]:
                        del node[child_key]
                else:
                    node[:] = [item for item in node if item is not OMIT]

            container[key] = reviver(key, node)

    result = holder[""]
    return None if result is OMIT else result
