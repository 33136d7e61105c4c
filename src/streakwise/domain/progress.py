"""Per-day progress aggregation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Union

from .calendar import REFERENCE_TZ
from .entities import Habit, ProgressRecord
from .recurrence import DEFAULT_EMPTY_POLICY, EmptyWeekdaySetPolicy, is_habit_scheduled

RecordSource = Union[Iterable[ProgressRecord], Mapping[date, ProgressRecord]]


class DayStatus(str, Enum):
    PERFECT = "perfect"
    PARTIAL = "partial"
    MISSED = "missed"


def completion_ratio(progress: int, goal: int) -> float:
    """Progress over goal; a non-positive goal gives 0.0."""

    if goal <= 0:
        return 0.0
    return progress / goal


def is_complete(progress: int, goal: int) -> bool:
    return completion_ratio(progress, goal) >= 1.0


def classify(progress: int, goal: int) -> DayStatus:
    if is_complete(progress, goal):
        return DayStatus.PERFECT
    if progress > 0:
        return DayStatus.PARTIAL
    return DayStatus.MISSED


def increment(current: int, goal: int) -> int:
    """Add one unit of progress without passing the goal."""

    if current >= goal:
        return current
    return current + 1


def decrement(current: int) -> int:
    return max(current - 1, 0)


@dataclass(frozen=True, slots=True)
class DayCompletion:
    """Derived completion signal for one habit on one day."""

    day: date
    scheduled: bool
    progress: int
    goal: int
    is_active: bool

    @property
    def ratio(self) -> float:
        return completion_ratio(self.progress, self.goal)

    @property
    def completed(self) -> bool:
        return self.ratio >= 1.0

    @property
    def status(self) -> DayStatus:
        return classify(self.progress, self.goal)


def _recency(record: ProgressRecord) -> float:
    stamp = record.updated_at or record.created_at
    if stamp is None:
        return float("-inf")
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=REFERENCE_TZ)
    return stamp.timestamp()


def index_records(
    records: Iterable[ProgressRecord], habit_id: Optional[str] = None
) -> dict[date, ProgressRecord]:
    """Map day -> record; duplicate days keep the most recently updated row."""

    indexed: dict[date, ProgressRecord] = {}
    for record in records:
        if habit_id is not None and record.habit_id != habit_id:
            continue
        existing = indexed.get(record.day)
        if existing is None or _recency(record) >= _recency(existing):
            indexed[record.day] = record
    return indexed


def _as_index(records: RecordSource, habit_id: str) -> Mapping[date, ProgressRecord]:
    if isinstance(records, Mapping):
        return records
    return index_records(records, habit_id)


def day_completion(
    records: RecordSource,
    habit: Habit,
    day: date,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> DayCompletion:
    """Combine the day's progress record (if any) with the habit's schedule."""

    record = _as_index(records, habit.id).get(day)
    if record is None:
        progress, goal = 0, habit.daily_goal
    else:
        progress, goal = record.progress, record.goal

    scheduled = is_habit_scheduled(habit, day, today, empty_policy=empty_policy)
    return DayCompletion(
        day=day,
        scheduled=scheduled,
        progress=progress,
        goal=goal,
        is_active=scheduled and day <= today,
    )


__all__ = [
    "DayCompletion",
    "DayStatus",
    "classify",
    "completion_ratio",
    "day_completion",
    "decrement",
    "increment",
    "index_records",
    "is_complete",
]
