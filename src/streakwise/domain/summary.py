"""Calendar summaries, weekly/monthly rollups and period statistics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

from .calendar import enumerate_days, month_start, week_start, window_ending
from .entities import Habit, ProgressRecord
from .progress import DayCompletion, DayStatus, classify, day_completion, index_records
from .recurrence import DEFAULT_EMPTY_POLICY, EmptyWeekdaySetPolicy

DEFAULT_WINDOW_DAYS = 90


def percent(part: int | float, whole: int | float) -> int:
    """Rounded whole percentage (half-up); 0 when ``whole`` is 0."""

    if whole <= 0:
        return 0
    value = Decimal(str(part)) * 100 / Decimal(str(whole))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class HabitCalendarSummary:
    """Per-habit grid of day completions over a fixed window."""

    habit_id: str
    title: str
    window_start: date
    days: tuple[DayCompletion, ...]
    total_scheduled_days: int
    completed_scheduled_days: int
    icon: Optional[str] = None

    @property
    def percent_complete(self) -> int:
        return percent(self.completed_scheduled_days, self.total_scheduled_days)

    @property
    def window_length(self) -> int:
        return len(self.days)


def build_summary(
    habit: Habit,
    records: Iterable[ProgressRecord],
    window_start: date,
    window_length: int,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> HabitCalendarSummary:
    """Compose day completions for ``window_length`` days from ``window_start``."""

    by_day = index_records(records, habit.id)
    days = tuple(
        day_completion(by_day, habit, d, today, empty_policy=empty_policy)
        for d in enumerate_days(window_start, window_length)
    )
    active = [d for d in days if d.is_active]
    return HabitCalendarSummary(
        habit_id=habit.id,
        title=habit.title,
        icon=habit.icon,
        window_start=window_start,
        days=days,
        total_scheduled_days=len(active),
        completed_scheduled_days=sum(1 for d in active if d.completed),
    )


def build_recent_summary(
    habit: Habit,
    records: Iterable[ProgressRecord],
    today: date,
    window_length: int = DEFAULT_WINDOW_DAYS,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> HabitCalendarSummary:
    """Summary for the ``window_length`` days ending today."""

    return build_summary(
        habit,
        records,
        window_ending(today, window_length),
        window_length,
        today,
        empty_policy=empty_policy,
    )


class Granularity(str, Enum):
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class PeriodRollup:
    period_start: date
    scheduled: int
    completed: int

    @property
    def percent_complete(self) -> int:
        return percent(self.completed, self.scheduled)


def rollup(summary: HabitCalendarSummary, granularity: Granularity) -> list[PeriodRollup]:
    """Bucket a summary's days into Sunday-start weeks or calendar months."""

    bucket_of = week_start if granularity is Granularity.WEEK else month_start
    buckets: dict[date, list[int]] = {}
    for day in summary.days:
        counts = buckets.setdefault(bucket_of(day.day), [0, 0])
        if day.is_active:
            counts[0] += 1
            if day.completed:
                counts[1] += 1
    return [
        PeriodRollup(period_start=start, scheduled=counts[0], completed=counts[1])
        for start, counts in sorted(buckets.items())
    ]


class StatsPeriod(Enum):
    WEEK = ("week", 7)
    MONTH = ("month", 30)
    YEAR = ("year", 365)

    def __init__(self, label: str, days: int):
        self.label = label
        self.days = days

    @classmethod
    def from_label(cls, label: str) -> "StatsPeriod":
        for member in cls:
            if member.label == label.strip().lower():
                return member
        raise ValueError(f"Unknown stats period: {label!r}")


@dataclass(frozen=True, slots=True)
class DayStat:
    day: date
    percent: float  # 0.0 .. 1.0


@dataclass(frozen=True, slots=True)
class PeriodStats:
    """Cross-habit statistics over the last 7, 30 or 365 days."""

    period: StatsPeriod
    start: date
    end: date
    bars: tuple[DayStat, ...]
    perfect: int
    partial: int
    missed: int
    average_completion: int
    completed_by_habit: dict[str, int] = field(default_factory=dict)


def _indexes(
    habits: Iterable[Habit], records_by_habit: Mapping[str, Iterable[ProgressRecord]]
) -> dict[str, dict[date, ProgressRecord]]:
    return {h.id: index_records(records_by_habit.get(h.id, ()), h.id) for h in habits}


def period_stats(
    habits: Iterable[Habit],
    records_by_habit: Mapping[str, Iterable[ProgressRecord]],
    today: date,
    period: StatsPeriod = StatsPeriod.WEEK,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> PeriodStats:
    """Daily completion bars and perfect/partial/missed tallies for ``period``.

    A day's bar is the mean capped ratio over the habits scheduled that day.
    ``average_completion`` averages the per-day share of scheduled habits that
    were completed, over days that had at least one scheduled habit.
    """

    habit_list = list(habits)
    indexes = _indexes(habit_list, records_by_habit)
    start = window_ending(today, period.days)

    tallies = {status: 0 for status in DayStatus}
    completed_by_habit: dict[str, int] = {}
    for habit in habit_list:
        done = 0
        for day, record in indexes[habit.id].items():
            if start <= day <= today:
                status = classify(record.progress, record.goal)
                tallies[status] += 1
                if status is DayStatus.PERFECT:
                    done += 1
        completed_by_habit[habit.id] = done

    bars: list[DayStat] = []
    daily_rates: list[float] = []
    for day in enumerate_days(start, period.days):
        cells = [
            day_completion(indexes[h.id], h, day, today, empty_policy=empty_policy)
            for h in habit_list
        ]
        active = [c for c in cells if c.is_active]
        if not active:
            bars.append(DayStat(day=day, percent=0.0))
            continue
        bars.append(DayStat(day=day, percent=sum(min(c.ratio, 1.0) for c in active) / len(active)))
        daily_rates.append(sum(1 for c in active if c.completed) / len(active))

    average = percent(sum(daily_rates), len(daily_rates)) if daily_rates else 0
    return PeriodStats(
        period=period,
        start=start,
        end=today,
        bars=tuple(bars),
        perfect=tallies[DayStatus.PERFECT],
        partial=tallies[DayStatus.PARTIAL],
        missed=tallies[DayStatus.MISSED],
        average_completion=average,
        completed_by_habit=completed_by_habit,
    )


def completed_habits_count(
    habits: Iterable[Habit],
    records_by_habit: Mapping[str, Iterable[ProgressRecord]],
    day: date,
    today: date,
    *,
    empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
) -> int:
    """Number of habits scheduled on ``day`` whose goal was met."""

    count = 0
    for habit in habits:
        cell = day_completion(
            records_by_habit.get(habit.id, ()), habit, day, today, empty_policy=empty_policy
        )
        if cell.is_active and cell.completed:
            count += 1
    return count


__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "DayStat",
    "Granularity",
    "HabitCalendarSummary",
    "PeriodRollup",
    "PeriodStats",
    "StatsPeriod",
    "build_recent_summary",
    "build_summary",
    "completed_habits_count",
    "percent",
    "period_stats",
    "rollup",
]
