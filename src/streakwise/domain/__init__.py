"""Pure habit scheduling, progress and streak computation."""

from .calendar import (
    day_key,
    days_between,
    enumerate_days,
    parse_day_key,
    start_of_day,
    weekday_index,
)
from .clock import Clock, FixedClock, SystemClock
from .entities import ActiveWindow, Habit, ProgressRecord, RecurrenceKind, RecurrenceRule
from .progress import DayCompletion, DayStatus, completion_ratio, day_completion
from .recurrence import EmptyWeekdaySetPolicy, active_habits_on, is_scheduled
from .streaks import HabitStreakState, MarkCompleted, MarkIncompleted, apply, compute_streaks
from .summary import (
    Granularity,
    HabitCalendarSummary,
    PeriodStats,
    StatsPeriod,
    build_recent_summary,
    build_summary,
    period_stats,
    rollup,
)

__all__ = [
    "ActiveWindow",
    "Clock",
    "DayCompletion",
    "DayStatus",
    "EmptyWeekdaySetPolicy",
    "FixedClock",
    "Granularity",
    "Habit",
    "HabitCalendarSummary",
    "HabitStreakState",
    "MarkCompleted",
    "MarkIncompleted",
    "PeriodStats",
    "ProgressRecord",
    "RecurrenceKind",
    "RecurrenceRule",
    "StatsPeriod",
    "SystemClock",
    "active_habits_on",
    "apply",
    "build_recent_summary",
    "build_summary",
    "completion_ratio",
    "compute_streaks",
    "day_completion",
    "day_key",
    "days_between",
    "enumerate_days",
    "is_scheduled",
    "parse_day_key",
    "period_stats",
    "rollup",
    "start_of_day",
    "weekday_index",
]
