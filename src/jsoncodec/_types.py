"""Shared type aliases and the slot-removal marker used by transform hooks."""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from typing import Final

# Recursive value tree produced by parse and accepted by stringify
JsonValue = (
    str
    | int
    | float
    | bool
    | None
    | datetime
    | dict[str, "JsonValue"]
    | list["JsonValue"]
)
type Position = int

# Member key seen by reviver/replacer hooks: object key or array index
type HookKey = str | int

Reviver = Callable[[HookKey, Any], Any] | None
Replacer = Callable[[HookKey, Any], Any] | None
DateParser = Callable[[str], datetime | None] | None
DateSerializer = Callable[[datetime], str]


class _Omit:
    """
    Marker returned from a reviver or replacer to drop the current slot.

    There is exactly one instance, exported as ``OMIT``.
    """

    _instance: "_Omit | None" = None

    def __new__(cls) -> "_Omit":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "OMIT"


OMIT: Final = _Omit()
