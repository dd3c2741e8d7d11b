"""Shared id, date and clock helpers."""

from pocketplan.utils.clock import Clock, FixedClock, SystemClock
from pocketplan.utils.dates import (
    current_month,
    days_until,
    month_key,
    months_between,
    parse_iso,
    trailing_months,
)
from pocketplan.utils.ids import generate_id

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "current_month",
    "days_until",
    "generate_id",
    "month_key",
    "months_between",
    "parse_iso",
    "trailing_months",
]
