"""Day-granularity date helpers.

Every day-stamp in Streakwise is a ``datetime.date`` in the UTC calendar.
Naive datetimes are read as UTC, aware ones are converted before truncation,
so local time never leaks into day boundaries.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

REFERENCE_TZ = timezone.utc
DAY_KEY_FORMAT = "%Y-%m-%d"


def start_of_day(timestamp: datetime | date) -> date:
    """Truncate a timestamp to its UTC calendar day."""

    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.date()
        return timestamp.astimezone(REFERENCE_TZ).date()
    return timestamp


def days_between(a: date, b: date) -> int:
    """Return ``b - a`` in whole days (signed)."""

    return (b - a).days


def enumerate_days(start: date, count: int) -> list[date]:
    """Return ``count`` consecutive days beginning with ``start``."""

    return [start + timedelta(days=offset) for offset in range(max(count, 0))]


def weekday_index(day: date) -> int:
    """Weekday as 0..6 with 0 = Sunday."""

    # date.weekday() is Monday=0..Sunday=6
    return (day.weekday() + 1) % 7


def window_ending(today: date, length: int) -> date:
    """First day of a ``length``-day window whose last day is ``today``."""

    return today - timedelta(days=max(length, 1) - 1)


def week_start(day: date) -> date:
    """Sunday on or before ``day``."""

    return day - timedelta(days=weekday_index(day))


def month_start(day: date) -> date:
    return day.replace(day=1)


def day_key(day: date) -> str:
    """Format a day as the ``yyyy-MM-dd`` key used by the JSON contract."""

    return day.strftime(DAY_KEY_FORMAT)


def parse_day_key(text: str) -> date:
    """Parse a ``yyyy-MM-dd`` key; longer ISO timestamps are truncated first."""

    value = text.strip()
    if len(value) > 10:
        return start_of_day(datetime.fromisoformat(value.replace("Z", "+00:00")))
    return datetime.strptime(value, DAY_KEY_FORMAT).date()


__all__ = [
    "DAY_KEY_FORMAT",
    "REFERENCE_TZ",
    "day_key",
    "days_between",
    "enumerate_days",
    "month_start",
    "parse_day_key",
    "start_of_day",
    "week_start",
    "weekday_index",
    "window_ending",
]
