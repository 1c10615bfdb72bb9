"""Default hooks mapping ``datetime`` values to and from ISO-8601 text."""

import re
from datetime import UTC
from datetime import datetime

# Canonical wire form written by format_timestamp
_ISO_TIMESTAMP = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}"
    r"(?:\.[0-9]{1,6})?(?:Z|[+-][0-9]{2}:[0-9]{2})"
)


def format_timestamp(value: datetime) -> str:
    """
    Formats a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Aware values are converted to UTC; naive values are taken to already
    be in UTC. Sub-millisecond precision is truncated.
    """
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    millis = value.microsecond // 1000
    return f"{value:%Y-%m-%dT%H:%M:%S}.{millis:03d}Z"


def parse_timestamp(text: str) -> datetime | None:
    """
    Parses an ISO-8601 timestamp with an explicit offset, or returns None.

    Intended as a ``date_parser`` hook: strings that do not look like a full
    timestamp (or name an impossible date) are left for the caller as
    plain strings.
    """
    if _ISO_TIMESTAMP.fullmatch(text) is None:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None
