"""Streak engine.

Streak counters move only through :func:`apply`, a pure transition
``(HabitStreakState, event) -> HabitStreakState``. Persisting the result is
the caller's job.

Transition table::

    MarkCompleted(today)    today already completed      -> unchanged
                            no earlier completion        -> current = 1
                            gap to prior day <= 1        -> current + 1
                            gap to prior day  > 1        -> current = 1
                            (best = max(best, current) in every branch)
    MarkIncompleted(today)  last_completed_date == today -> drop today,
                                                            restore previous_streak,
                                                            else current - 1 (floor 0)
                            otherwise                    -> unchanged

best_streak is never lowered.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from .calendar import days_between, start_of_day

# A prior completion this many days back (or fewer) continues the streak.
CONTINUATION_GAP = 1


@dataclass(frozen=True, slots=True)
class HabitStreakState:
    """Completion history and streak counters owned by a habit."""

    completed_dates: frozenset[date] = frozenset()
    last_completed_date: Optional[date] = None
    current_streak: int = 0
    best_streak: int = 0
    # current_streak as it stood before the latest completion, for undo
    previous_streak: Optional[int] = None

    @classmethod
    def initial(cls) -> "HabitStreakState":
        return cls()

    def is_completed_on(self, day: date) -> bool:
        return day in self.completed_dates


@dataclass(frozen=True, slots=True)
class MarkCompleted:
    at: datetime | date


@dataclass(frozen=True, slots=True)
class MarkIncompleted:
    at: datetime | date


StreakEvent = Union[MarkCompleted, MarkIncompleted]


def _latest_before(days: Iterable[date], day: date) -> Optional[date]:
    earlier = [d for d in days if d < day]
    return max(earlier) if earlier else None


def mark_completed(state: HabitStreakState, at: datetime | date) -> HabitStreakState:
    today = start_of_day(at)
    if today in state.completed_dates:
        return state

    prior = _latest_before(state.completed_dates, today)
    if prior is None or days_between(prior, today) > CONTINUATION_GAP:
        current = 1
    else:
        current = state.current_streak + 1

    return HabitStreakState(
        completed_dates=state.completed_dates | {today},
        last_completed_date=today,
        current_streak=current,
        best_streak=max(state.best_streak, current),
        previous_streak=state.current_streak,
    )


def mark_incompleted(state: HabitStreakState, at: datetime | date) -> HabitStreakState:
    today = start_of_day(at)
    if state.last_completed_date != today:
        return state

    remaining = frozenset(d for d in state.completed_dates if d != today)
    if state.previous_streak is not None:
        current = state.previous_streak
    else:
        current = max(state.current_streak - 1, 0)
    return HabitStreakState(
        completed_dates=remaining,
        last_completed_date=max(remaining) if remaining else None,
        current_streak=current,
        best_streak=state.best_streak,
    )


def apply(state: HabitStreakState, event: StreakEvent) -> HabitStreakState:
    """Return the state that results from ``event``."""

    if isinstance(event, MarkCompleted):
        return mark_completed(state, event.at)
    if isinstance(event, MarkIncompleted):
        return mark_incompleted(state, event.at)
    raise TypeError(f"Unsupported streak event: {event!r}")


def replay(
    events: Iterable[StreakEvent], state: Optional[HabitStreakState] = None
) -> HabitStreakState:
    """Fold ``events`` in order, starting from ``state`` or the initial state."""

    result = state or HabitStreakState.initial()
    for event in events:
        result = apply(result, event)
    return result


def compute_streaks(days: Iterable[date], *, today: date) -> tuple[int, int]:
    """Return (current_streak, longest_streak) recomputed from completion days.

    The current run counts when it ends today or yesterday, so a habit not yet
    done today keeps yesterday's streak alive.
    """

    unique = sorted(set(days))
    longest = 0
    run = 0
    last_day: Optional[date] = None
    for d in unique:
        if last_day is not None and d == last_day + timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d

    current = 0
    completed = set(unique)
    cursor = today if today in completed else today - timedelta(days=1)
    while cursor in completed:
        current += 1
        cursor -= timedelta(days=1)

    return current, longest


def completion_rate(days: Iterable[date], *, today: date) -> float:
    """Completed days divided by days elapsed since the first completion."""

    unique = {d for d in days if d <= today}
    if not unique:
        return 0.0
    elapsed = days_between(min(unique), today)
    if elapsed <= 0:
        return 1.0
    return len(unique) / (elapsed + 1)


__all__ = [
    "CONTINUATION_GAP",
    "HabitStreakState",
    "MarkCompleted",
    "MarkIncompleted",
    "StreakEvent",
    "apply",
    "completion_rate",
    "compute_streaks",
    "mark_completed",
    "mark_incompleted",
    "replay",
]
