"""RFC 3339 date and date-time helpers for calendar input values.

Input documents carry `full-date` strings (``2026-02-24``) for all-day events and
`date-time` strings with a mandatory offset (``2026-02-24T10:00:00-04:00``) for
timed events. The shape is checked with a strict pattern first, then the value is
parsed with dateutil so calendar-impossible values (``2026-02-30``) are rejected too.
"""

import re
from datetime import UTC, date, datetime

from dateutil.parser import isoparse

FULL_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATE_TIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_full_date(value: str) -> date:
    """Parse an RFC 3339 ``full-date`` string.

    Args:
        value: Date string such as ``2026-02-24``

    Returns:
        The parsed date

    Raises:
        ValueError: If the string is not a valid full-date
    """
    if not FULL_DATE_PATTERN.match(value):
        raise ValueError(f"'{value}' is not an RFC 3339 full-date")
    return date.fromisoformat(value)


def parse_date_time(value: str) -> datetime:
    """Parse an RFC 3339 ``date-time`` string into an offset-aware datetime.

    The offset supplied by the caller is preserved; no timezone database lookup
    takes place.

    Args:
        value: Date-time string such as ``2026-02-24T10:00:00-04:00``

    Returns:
        Timezone-aware datetime carrying the original offset

    Raises:
        ValueError: If the string is not a valid date-time
    """
    if not DATE_TIME_PATTERN.match(value):
        raise ValueError(f"'{value}' is not an RFC 3339 date-time")
    # isoparse only knows the upper-case designators
    normalized = value.upper().replace(" ", "T")
    return isoparse(normalized)


def to_utc_seconds(dt: datetime) -> datetime:
    """Convert an aware datetime to UTC with second precision."""
    if dt.tzinfo is None:
        raise ValueError("Cannot convert a naive datetime to UTC")
    return dt.astimezone(UTC).replace(microsecond=0)

