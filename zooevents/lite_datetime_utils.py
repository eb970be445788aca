"""DateTime coercion utilities for event definitions and query windows.

Event datasets store timestamps as epoch milliseconds while HTTP callers and
tests tend to pass ISO-8601 strings or ``datetime`` objects. Everything is
funnelled through :func:`coerce_timestamp` so the expansion core only ever
compares timezone-aware datetimes.
"""

import logging
from datetime import UTC, datetime, time
from typing import Any, Optional
from zoneinfo import ZoneInfo

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

# Last representable instant of a calendar day at millisecond precision
END_OF_DAY = time(23, 59, 59, 999000)


def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensure datetime is timezone-aware.

    Args:
        dt: Datetime to make timezone-aware

    Returns:
        Timezone-aware datetime (UTC if originally naive)
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def from_epoch_ms(value: float) -> datetime:
    """Convert epoch milliseconds to a UTC datetime.

    Raises:
        ValueError: If the value is outside the representable datetime range
    """
    try:
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Epoch milliseconds out of range: {value!r}") from e


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds (naive means UTC)."""
    aware = ensure_timezone_aware(dt)
    delta = aware - datetime(1970, 1, 1, tzinfo=UTC)
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def coerce_timestamp(value: Any) -> datetime:
    """Coerce a datetime, epoch-ms number or ISO-8601 string to an aware datetime.

    Numeric strings (as they arrive in query parameters) are treated as
    epoch milliseconds.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(value, datetime):
        return ensure_timezone_aware(value)
    # bool is an int subclass but never a meaningful timestamp
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return from_epoch_ms(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        if text.lstrip("-").isdigit():
            return from_epoch_ms(int(text))
        try:
            parsed = dateutil_parser.isoparse(text)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid timestamp {value!r}: {e}") from e
        return ensure_timezone_aware(parsed)
    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def localize(dt: datetime, tz: Optional[ZoneInfo]) -> datetime:
    """Convert ``dt`` into ``tz`` when one is given, otherwise return it unchanged."""
    if tz is None:
        return dt
    return ensure_timezone_aware(dt).astimezone(tz)


def start_of_day(dt: datetime) -> datetime:
    """Return midnight of the calendar day containing ``dt`` in its own timezone."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Return 23:59:59.999 of the calendar day containing ``dt`` in its own timezone."""
    return dt.replace(
        hour=END_OF_DAY.hour,
        minute=END_OF_DAY.minute,
        second=END_OF_DAY.second,
        microsecond=END_OF_DAY.microsecond,
    )
