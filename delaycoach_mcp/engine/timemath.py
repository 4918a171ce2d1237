"""Time arithmetic shared by the scoring engine.

Due dates are calendar dates; a task falls due at UTC midnight at the start
of its due date. Naive datetimes are treated as UTC.
"""

import math
from datetime import date, datetime, timezone

SECONDS_PER_HOUR = 60 * 60
HOURS_PER_DAY = 24


def utcnow() -> datetime:
    """Read the wall clock. Only the tool layer should call this."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def due_instant(due: date) -> datetime:
    return datetime(due.year, due.month, due.day, tzinfo=timezone.utc)


def hours_until_due(due: date, now: datetime) -> float:
    """Fractional hours from now until the due instant (negative once past)."""
    return (due_instant(due) - as_utc(now)).total_seconds() / SECONDS_PER_HOUR


def days_until_due(due: date, now: datetime) -> int:
    """Whole days until due, rounded up (so 36h left counts as 2 days)."""
    return math.ceil(hours_until_due(due, now) / HOURS_PER_DAY)


def hours_since(moment: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(moment)).total_seconds() / SECONDS_PER_HOUR


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
