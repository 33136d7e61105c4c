"""Recurrence evaluation: is a habit due on a given day?"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterable

from .calendar import weekday_index
from .entities import ActiveWindow, Habit, RecurrenceKind, RecurrenceRule


class EmptyWeekdaySetPolicy(str, Enum):
    """How a weekday rule with no weekdays selected is evaluated."""

    EVERY_DAY = "every_day"
    NEVER = "never"


DEFAULT_EMPTY_POLICY = EmptyWeekdaySetPolicy.EVERY_DAY


def is_scheduled(
    rule: RecurrenceRule,
    window: ActiveWindow,
    day: date,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> bool:
    """Return True when ``day`` is a due day for ``rule`` inside ``window``.

    Days before the window start, after its end (an open end means today) or
    after today are never scheduled.
    """

    if day > today or not window.contains(day, today):
        return False
    if rule.kind is RecurrenceKind.DAILY:
        return True
    if not rule.weekdays:
        return empty_policy is EmptyWeekdaySetPolicy.EVERY_DAY
    return weekday_index(day) in rule.weekdays


def is_habit_scheduled(
    habit: Habit,
    day: date,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> bool:
    return is_scheduled(habit.recurrence, habit.window, day, today, empty_policy=empty_policy)


def scheduled_days(
    rule: RecurrenceRule,
    window: ActiveWindow,
    days: Iterable[date],
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> list[date]:
    """Filter ``days`` down to the scheduled ones, preserving order."""

    return [d for d in days if is_scheduled(rule, window, d, today, empty_policy=empty_policy)]


def active_habits_on(
    habits: Iterable[Habit],
    day: date,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> list[Habit]:
    """Habits due on ``day``."""

    return [h for h in habits if is_habit_scheduled(h, day, today, empty_policy=empty_policy)]


__all__ = [
    "DEFAULT_EMPTY_POLICY",
    "EmptyWeekdaySetPolicy",
    "active_habits_on",
    "is_habit_scheduled",
    "is_scheduled",
    "scheduled_days",
]
