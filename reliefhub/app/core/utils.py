"""Shared helpers"""

import math
import re
from datetime import UTC, datetime

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def utc_now_naive() -> datetime:
    """Current UTC time without tzinfo, matching the `timestamp without tz` columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_iso_utc(value: datetime) -> str:
    """Render a naive UTC datetime as ISO 8601 with millisecond precision, e.g. 2026-01-01T10:00:00.000Z"""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return f"{value.isoformat(timespec='milliseconds')}Z"


def parse_int(value: object) -> int | None:
    """Lenient integer parsing for user-typed answers.

    Strings are read up to the first non-digit after an optional sign
    (" 13", "13abc" -> 13; "abc" -> None). Finite numbers are truncated
    toward zero. Anything else, booleans included, has no integer value.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        return int(match.group(1))
    return None
