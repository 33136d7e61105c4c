"""Domain entities: habits, recurrence rules and progress records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Optional
from uuid import uuid4

from .calendar import REFERENCE_TZ
from .streaks import HabitStreakState


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(REFERENCE_TZ)


class RecurrenceKind(str, Enum):
    DAILY = "daily"
    WEEKDAYS = "weekdays"


# Frequency names used by the hosting app; weekly and custom share one rule.
_FREQUENCY_ALIASES = {
    "daily": RecurrenceKind.DAILY,
    "weekly": RecurrenceKind.WEEKDAYS,
    "custom": RecurrenceKind.WEEKDAYS,
    "weekdays": RecurrenceKind.WEEKDAYS,
}


@dataclass(frozen=True, slots=True)
class RecurrenceRule:
    """Either every day or a set of weekdays (0 = Sunday .. 6 = Saturday)."""

    kind: RecurrenceKind = RecurrenceKind.DAILY
    weekdays: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        if self.kind is RecurrenceKind.DAILY and self.weekdays:
            raise ValueError("Daily recurrence does not take a weekday set")
        bad = sorted(d for d in self.weekdays if not 0 <= d <= 6)
        if bad:
            raise ValueError(f"Weekday indices must be within 0..6, got {bad}")

    @classmethod
    def daily(cls) -> "RecurrenceRule":
        return cls(RecurrenceKind.DAILY)

    @classmethod
    def on_weekdays(cls, weekdays: Iterable[int]) -> "RecurrenceRule":
        return cls(RecurrenceKind.WEEKDAYS, frozenset(int(d) for d in weekdays))

    @classmethod
    def parse(cls, frequency: str, weekdays: Optional[Iterable[int]] = None) -> "RecurrenceRule":
        """Build a rule from the app's ``repeat_frequency`` string and weekday list."""

        try:
            kind = _FREQUENCY_ALIASES[frequency.strip().lower()]
        except KeyError as exc:
            raise ValueError(f"Unknown repeat frequency: {frequency!r}") from exc
        if kind is RecurrenceKind.DAILY:
            return cls.daily()
        return cls.on_weekdays(weekdays or ())

    @property
    def frequency(self) -> str:
        return "daily" if self.kind is RecurrenceKind.DAILY else "custom"


@dataclass(frozen=True, slots=True)
class ActiveWindow:
    """Inclusive date range during which a habit can be scheduled."""

    start: date
    end: Optional[date] = None

    def resolved_end(self, today: date) -> date:
        return self.end if self.end is not None else today

    def is_empty(self) -> bool:
        return self.end is not None and self.end < self.start

    def contains(self, day: date, today: date) -> bool:
        return self.start <= day <= self.resolved_end(today)


@dataclass(frozen=True, slots=True)
class Habit:
    """Immutable habit snapshot with its completion and streak fields."""

    owner_id: str
    title: str
    start_date: date
    daily_goal: int = 1
    recurrence: RecurrenceRule = field(default_factory=RecurrenceRule.daily)
    end_date: Optional[date] = None
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)
    reminder_time: Optional[time] = None
    unit: Optional[str] = None
    icon: Optional[str] = None
    completed_dates: frozenset[date] = frozenset()
    last_completed_date: Optional[date] = None
    current_streak: int = 0
    best_streak: int = 0
    previous_streak: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Habit title must not be empty")
        if self.daily_goal <= 0:
            raise ValueError(f"daily_goal must be a positive integer, got {self.daily_goal}")
        if self.current_streak < 0 or self.best_streak < 0:
            raise ValueError("Streak counters cannot be negative")
        if self.best_streak < self.current_streak:
            raise ValueError("best_streak must be >= current_streak")

    @property
    def window(self) -> ActiveWindow:
        return ActiveWindow(self.start_date, self.end_date)

    @property
    def streak_state(self) -> HabitStreakState:
        return HabitStreakState(
            completed_dates=frozenset(self.completed_dates),
            last_completed_date=self.last_completed_date,
            current_streak=self.current_streak,
            best_streak=self.best_streak,
            previous_streak=self.previous_streak,
        )

    def with_streak_state(self, state: HabitStreakState) -> "Habit":
        return replace(
            self,
            completed_dates=state.completed_dates,
            last_completed_date=state.last_completed_date,
            current_streak=state.current_streak,
            best_streak=state.best_streak,
            previous_streak=state.previous_streak,
        )


@dataclass(frozen=True, slots=True)
class ProgressRecord:
    """Accumulated progress for one habit on one calendar day."""

    owner_id: str
    habit_id: str
    day: date
    progress: int = 0
    goal: int = 1
    id: str = field(default_factory=_new_id)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.progress < 0:
            raise ValueError(f"progress cannot be negative, got {self.progress}")
        if self.goal < 0:
            raise ValueError(f"goal cannot be negative, got {self.goal}")


__all__ = [
    "ActiveWindow",
    "Habit",
    "ProgressRecord",
    "RecurrenceKind",
    "RecurrenceRule",
]
