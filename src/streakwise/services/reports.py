"""Report builders: calendar cards, rollups and period statistics for an owner."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..domain.calendar import window_ending
from ..domain.entities import Habit, ProgressRecord
from ..domain.recurrence import DEFAULT_EMPTY_POLICY, EmptyWeekdaySetPolicy, active_habits_on
from ..domain.summary import (
    DEFAULT_WINDOW_DAYS,
    Granularity,
    HabitCalendarSummary,
    PeriodRollup,
    PeriodStats,
    StatsPeriod,
    build_summary,
    period_stats,
    rollup,
)
from ..logging_config import get_logger
from .tracker import HabitTracker

logger = get_logger("reports")


class ReportService:
    """Fetches snapshots through the tracker's repositories and runs the pure builders."""

    def __init__(
        self,
        tracker: HabitTracker,
        *,
        window_days: int = DEFAULT_WINDOW_DAYS,
        empty_policy: EmptyWeekdaySetPolicy = DEFAULT_EMPTY_POLICY,
    ):
        if window_days <= 0:
            raise ValueError("window_days must be positive")
        self.tracker = tracker
        self.window_days = window_days
        self.empty_policy = empty_policy

    @property
    def today(self) -> date:
        return self.tracker.clock.today()

    def _records(self, habit: Habit, start: date, end: date) -> list[ProgressRecord]:
        return self.tracker.records(habit.id, habit.owner_id, start, end)

    def calendar(
        self,
        habit_id: str,
        owner_id: str,
        *,
        window_start: Optional[date] = None,
        window_length: Optional[int] = None,
    ) -> HabitCalendarSummary:
        """One habit's calendar, by default the configured window ending today."""

        today = self.today
        length = window_length or self.window_days
        start = window_start or window_ending(today, length)
        habit = self.tracker.get_habit(habit_id, owner_id)
        records = self._records(habit, start, max(start, today))
        return build_summary(habit, records, start, length, today, empty_policy=self.empty_policy)

    def calendar_cards(self, owner_id: str) -> list[HabitCalendarSummary]:
        """Calendars for every habit the owner has, in repository order."""

        today = self.today
        start = window_ending(today, self.window_days)
        cards = []
        for habit in self.tracker.list_habits(owner_id):
            records = self._records(habit, start, today)
            cards.append(
                build_summary(
                    habit, records, start, self.window_days, today, empty_policy=self.empty_policy
                )
            )
        logger.info(
            "Calendar cards built",
            extra={"owner_id": owner_id, "habits": len(cards), "window_days": self.window_days},
        )
        return cards

    def habit_rollup(
        self,
        habit_id: str,
        owner_id: str,
        granularity: Granularity,
        *,
        window_length: Optional[int] = None,
    ) -> list[PeriodRollup]:
        summary = self.calendar(habit_id, owner_id, window_length=window_length)
        return rollup(summary, granularity)

    def stats_for_period(self, owner_id: str, period: StatsPeriod) -> PeriodStats:
        today = self.today
        start = window_ending(today, period.days)
        habits = self.tracker.list_habits(owner_id)
        records_by_habit = {h.id: self._records(h, start, today) for h in habits}
        return period_stats(
            habits, records_by_habit, today, period, empty_policy=self.empty_policy
        )

    def habits_due(self, owner_id: str, day: Optional[date] = None) -> list[Habit]:
        """Habits scheduled on ``day`` (today by default)."""

        today = self.today
        return active_habits_on(
            self.tracker.list_habits(owner_id),
            day or today,
            today,
            empty_policy=self.empty_policy,
        )


__all__ = ["ReportService"]
