"""
Clock abstraction.

Month-window queries and both projections depend on "now". Everything that
needs the current instant takes a Clock so tests can pin time.
"""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall-clock time in the local timezone (naive datetime)."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """
    A clock that only moves when told to.

    Usage:
        clock = FixedClock(datetime(2025, 3, 15, 9, 30))
        clock.advance(days=31)
    """

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, **delta) -> None:
        """Move forward by a timedelta given as keyword arguments."""
        self._instant = self._instant + timedelta(**delta)
