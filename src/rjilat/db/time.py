# src/rjilat/db/time.py
"""Time utilities for database models and time-window filters."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def start_of_day(moment: datetime) -> datetime:
    """Return midnight of the day containing `moment`."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(moment: datetime) -> datetime:
    """Return midnight on the first day of the month containing `moment`."""
    return start_of_day(moment).replace(day=1)
