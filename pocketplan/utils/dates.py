"""
Date helpers.

Entity dates are stored as ISO-8601 strings exactly as the caller supplied
them. Month matching is done on the string ('2025-03' prefix), so these
helpers only parse when arithmetic is actually needed.
"""

import math
from datetime import datetime


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 date or instant.

    Accepts date-only values ('2025-03-01') and instants with a trailing
    'Z' ('2025-03-01T10:00:00.000Z'). Offset-aware values are converted to
    local time and made naive so they compare with Clock.now().
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def month_key(moment: datetime) -> str:
    """Format a datetime as a 'YYYY-MM' month key."""
    return f"{moment.year:04d}-{moment.month:02d}"


def current_month(now: datetime) -> str:
    return month_key(now)


def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months from start to end, ignoring day-of-month."""
    return (end.year * 12 + end.month) - (start.year * 12 + start.month)


def days_until(target: str, now: datetime) -> int:
    """Days from now until an ISO date, rounded up (negative when past)."""
    seconds = (parse_iso(target) - now).total_seconds()
    return math.ceil(seconds / 86400)


def trailing_months(now: datetime, count: int) -> list[str]:
    """The `count` month keys ending with the current month, oldest first."""
    index = now.year * 12 + (now.month - 1)
    keys = []
    for offset in range(count - 1, -1, -1):
        year, month0 = divmod(index - offset, 12)
        keys.append(f"{year:04d}-{month0 + 1:02d}")
    return keys
