"""Habit tracking service: habit lifecycle, completion toggles and progress logging.

All read-modify-write cycles for one habit run under that habit's lock, so
concurrent toggles or increments for the same habit are applied one at a
time. Different habits never contend.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, time
from typing import Iterable, Optional

from ..domain.clock import Clock
from ..domain.entities import Habit, ProgressRecord, RecurrenceRule
from ..domain.progress import decrement, increment, is_complete
from ..domain.repositories import HabitRepository, ProgressRepository
from ..domain.streaks import MarkCompleted, MarkIncompleted, StreakEvent, apply
from ..logging_config import get_logger
from .errors import HabitNotFoundError

logger = get_logger("tracker")


class HabitTracker:
    """Coordinates repositories, the clock and the streak engine."""

    def __init__(
        self,
        habit_repo: HabitRepository,
        progress_repo: ProgressRepository,
        clock: Clock,
        *,
        auto_complete: bool = True,
    ):
        """Create a tracker.

        Args:
            habit_repo: Source and sink for habit snapshots
            progress_repo: Per-day progress storage
            clock: Supplies "today"
            auto_complete: When True, today's progress crossing the goal marks
                the habit completed (and dropping below it undoes that)
        """
        self.habit_repo = habit_repo
        self.progress_repo = progress_repo
        self.clock = clock
        self.auto_complete = auto_complete
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, habit_id: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(habit_id)
            if lock is None:
                lock = self._locks[habit_id] = threading.RLock()
            return lock

    # Habit lifecycle
    def create_habit(
        self,
        owner_id: str,
        title: str,
        *,
        daily_goal: int = 1,
        frequency: str = "daily",
        weekdays: Optional[Iterable[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reminder_time: Optional[time] = None,
        unit: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Habit:
        """Validate and persist a new habit starting today unless told otherwise."""

        habit = Habit(
            owner_id=owner_id,
            title=title.strip(),
            daily_goal=daily_goal,
            recurrence=RecurrenceRule.parse(frequency, weekdays),
            start_date=start_date or self.clock.today(),
            end_date=end_date,
            created_at=self.clock.now(),
            reminder_time=reminder_time,
            unit=unit,
            icon=icon,
        )
        created = self.habit_repo.create(habit)
        logger.info(
            "Habit created",
            extra={"habit_id": created.id, "owner_id": owner_id, "frequency": frequency},
        )
        return created

    def get_habit(self, habit_id: str, owner_id: str) -> Habit:
        habit = self.habit_repo.get(habit_id, owner_id=owner_id)
        if habit is None:
            raise HabitNotFoundError(habit_id, owner_id)
        return habit

    def list_habits(self, owner_id: str) -> list[Habit]:
        return self.habit_repo.list_all(owner_id)

    def delete_habit(self, habit_id: str, owner_id: str) -> None:
        try:
            with self._lock_for(habit_id):
                self.get_habit(habit_id, owner_id)
                self.habit_repo.delete(habit_id, owner_id=owner_id)
        finally:
            with self._locks_guard:
                self._locks.pop(habit_id, None)
        logger.info("Habit deleted", extra={"habit_id": habit_id, "owner_id": owner_id})

    # Completion toggles
    def _apply(self, habit_id: str, owner_id: str, event: StreakEvent) -> Habit:
        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id, owner_id)
            state = apply(habit.streak_state, event)
            if state == habit.streak_state:
                logger.info(
                    "Streak event made no change",
                    extra={"habit_id": habit_id, "event": type(event).__name__},
                )
                return habit
            updated = self.habit_repo.update(habit.with_streak_state(state))
        logger.info(
            "Streak updated",
            extra={
                "habit_id": habit_id,
                "event": type(event).__name__,
                "current_streak": updated.current_streak,
                "best_streak": updated.best_streak,
            },
        )
        return updated

    def mark_completed(self, habit_id: str, owner_id: str) -> Habit:
        """Record today's completion; repeating it on the same day is a no-op."""
        return self._apply(habit_id, owner_id, MarkCompleted(self.clock.now()))

    def mark_incompleted(self, habit_id: str, owner_id: str) -> Habit:
        """Undo today's completion; a no-op when today is not the last completion."""
        return self._apply(habit_id, owner_id, MarkIncompleted(self.clock.now()))

    def toggle_today(self, habit_id: str, owner_id: str) -> Habit:
        with self._lock_for(habit_id):
            habit = self.get_habit(habit_id, owner_id)
            if self.clock.today() in habit.completed_dates:
                return self.mark_incompleted(habit_id, owner_id)
            return self.mark_completed(habit_id, owner_id)

    # Progress logging
    def progress_for(
        self, habit_id: str, owner_id: str, day: Optional[date] = None
    ) -> ProgressRecord:
        """Stored record for the day, or an unsaved zero record with the habit's goal."""

        habit = self.get_habit(habit_id, owner_id)
        day = day or self.clock.today()
        record = self.progress_repo.get(habit_id, day, owner_id=owner_id)
        if record is not None:
            return record
        return ProgressRecord(
            owner_id=owner_id, habit_id=habit_id, day=day, progress=0, goal=habit.daily_goal
        )

    def records(
        self, habit_id: str, owner_id: str, start: date, end: date
    ) -> list[ProgressRecord]:
        return self.progress_repo.fetch_range(habit_id, start, end, owner_id=owner_id)

    def _write_progress(
        self,
        habit_id: str,
        owner_id: str,
        day: Optional[date],
        *,
        progress: Optional[int] = None,
        step: int = 0,
        goal: Optional[int] = None,
    ) -> ProgressRecord:
        with self._lock_for(habit_id):
            current = self.progress_for(habit_id, owner_id, day)
            target_goal = current.goal if goal is None else goal
            if progress is not None:
                value = progress
            elif step > 0:
                value = increment(current.progress, target_goal)
            else:
                value = decrement(current.progress)

            if value == current.progress and target_goal == current.goal:
                return current

            saved = self.progress_repo.upsert(replace(current, progress=value, goal=target_goal))
            logger.info(
                "Progress recorded",
                extra={
                    "habit_id": habit_id,
                    "day": saved.day.isoformat(),
                    "progress": saved.progress,
                    "goal": saved.goal,
                },
            )
            if self.auto_complete and saved.day == self.clock.today():
                self._sync_completion(
                    habit_id,
                    owner_id,
                    was_done=is_complete(current.progress, current.goal),
                    now_done=is_complete(saved.progress, saved.goal),
                )
            return saved

    def _sync_completion(
        self, habit_id: str, owner_id: str, *, was_done: bool, now_done: bool
    ) -> None:
        if now_done and not was_done:
            self.mark_completed(habit_id, owner_id)
        elif was_done and not now_done:
            self.mark_incompleted(habit_id, owner_id)

    def increment_progress(
        self, habit_id: str, owner_id: str, day: Optional[date] = None
    ) -> ProgressRecord:
        """Add one unit of progress, stopping at the day's goal."""
        return self._write_progress(habit_id, owner_id, day, step=1)

    def decrement_progress(
        self, habit_id: str, owner_id: str, day: Optional[date] = None
    ) -> ProgressRecord:
        """Remove one unit of progress, never going below zero."""
        return self._write_progress(habit_id, owner_id, day, step=-1)

    def set_progress(
        self,
        habit_id: str,
        owner_id: str,
        progress: int,
        *,
        goal: Optional[int] = None,
        day: Optional[date] = None,
    ) -> ProgressRecord:
        """Overwrite the day's progress (and optionally its goal)."""
        if progress < 0:
            raise ValueError(f"progress cannot be negative, got {progress}")
        if goal is not None and goal <= 0:
            raise ValueError(f"goal must be a positive integer, got {goal}")
        return self._write_progress(habit_id, owner_id, day, progress=progress, goal=goal)


__all__ = ["HabitTracker"]
