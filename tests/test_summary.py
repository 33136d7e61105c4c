"""Tests for calendar summaries, rollups and period statistics."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from streakwise.domain.calendar import enumerate_days, window_ending
from streakwise.domain.recurrence import EmptyWeekdaySetPolicy
from streakwise.domain.summary import (
    Granularity,
    StatsPeriod,
    build_recent_summary,
    build_summary,
    completed_habits_count,
    percent,
    period_stats,
    rollup,
)

TODAY = date(2024, 3, 6)  # Wednesday
MON, WED, FRI = 1, 3, 5


class TestPercent:
    @pytest.mark.parametrize(
        "part, whole, expected",
        [(10, 39, 26), (1, 8, 13), (1, 2, 50), (1, 3, 33), (2, 3, 67), (0, 5, 0), (3, 0, 0)],
    )
    def test_half_up_rounding(self, part, whole, expected):
        assert percent(part, whole) == expected


class TestBuildSummary:
    def test_ninety_day_mon_wed_fri_scenario(self, make_habit, record_factory):
        start = window_ending(TODAY, 90)
        habit = make_habit("Run", start_date=start, weekdays=[MON, WED, FRI])
        due = [d for d in enumerate_days(start, 90) if d.weekday() in (0, 2, 4)]
        records = [record_factory(habit, d, 1) for d in due[:10]]
        records += [record_factory(habit, d, 0) for d in due[10:]]

        summary = build_recent_summary(habit, records, TODAY)

        assert summary.window_start == date(2023, 12, 8)
        assert summary.window_length == 90
        assert summary.total_scheduled_days == len(due) == 39
        assert summary.completed_scheduled_days == 10
        assert summary.percent_complete == round(100 * 10 / 39) == 26

    def test_days_are_in_window_order(self, make_habit):
        habit = make_habit()
        summary = build_summary(habit, [], date(2024, 3, 1), 5, TODAY)
        assert [d.day for d in summary.days] == enumerate_days(date(2024, 3, 1), 5)

    def test_completed_never_exceeds_scheduled(self, make_habit, record_factory):
        habit = make_habit(weekdays=[MON])
        # progress logged on unscheduled days does not count
        records = [record_factory(habit, d, 1) for d in enumerate_days(date(2024, 2, 26), 10)]
        summary = build_summary(habit, records, date(2024, 2, 26), 10, TODAY)
        assert summary.total_scheduled_days == 2
        assert summary.completed_scheduled_days == 2

    def test_window_in_future_has_no_active_days(self, make_habit):
        habit = make_habit()
        summary = build_summary(habit, [], TODAY + timedelta(days=3), 7, TODAY)
        assert summary.total_scheduled_days == 0
        assert summary.percent_complete == 0
        assert not any(d.is_active for d in summary.days)

    def test_zero_goal_day_never_completed(self, make_habit, record_factory):
        habit = make_habit()
        records = [record_factory(habit, TODAY, 4, goal=0)]
        summary = build_summary(habit, records, TODAY, 1, TODAY)
        assert summary.total_scheduled_days == 1
        assert summary.completed_scheduled_days == 0

    def test_window_before_habit_start(self, make_habit):
        habit = make_habit(start_date=TODAY)
        summary = build_summary(habit, [], date(2024, 3, 1), 6, TODAY)
        assert summary.total_scheduled_days == 1

    def test_empty_weekday_policy_passed_through(self, make_habit):
        habit = make_habit(weekdays=[])
        every = build_summary(habit, [], date(2024, 3, 1), 6, TODAY)
        never = build_summary(
            habit, [], date(2024, 3, 1), 6, TODAY, empty_policy=EmptyWeekdaySetPolicy.NEVER
        )
        assert every.total_scheduled_days == 6
        assert never.total_scheduled_days == 0

    def test_carries_habit_identity(self, make_habit):
        habit = make_habit("Stretch", icon="figure.walk")
        summary = build_summary(habit, [], TODAY, 1, TODAY)
        assert (summary.habit_id, summary.title, summary.icon) == (
            habit.id,
            "Stretch",
            "figure.walk",
        )


class TestRollup:
    @pytest.fixture
    def summary(self, make_habit, record_factory):
        habit = make_habit(start_date=date(2024, 2, 1))
        done = [date(2024, 2, 26), date(2024, 2, 27), date(2024, 3, 4)]
        records = [record_factory(habit, d, 1) for d in done]
        # Sunday 2024-02-25 through Saturday 2024-03-09
        return build_summary(habit, records, date(2024, 2, 25), 14, TODAY)

    def test_weekly(self, summary):
        weeks = rollup(summary, Granularity.WEEK)
        assert [w.period_start for w in weeks] == [date(2024, 2, 25), date(2024, 3, 3)]
        assert [(w.scheduled, w.completed) for w in weeks] == [(7, 2), (4, 1)]
        assert [w.percent_complete for w in weeks] == [29, 25]

    def test_monthly(self, summary):
        months = rollup(summary, Granularity.MONTH)
        assert [m.period_start for m in months] == [date(2024, 2, 1), date(2024, 3, 1)]
        assert [(m.scheduled, m.completed) for m in months] == [(5, 2), (6, 1)]
        assert [m.percent_complete for m in months] == [40, 17]


class TestPeriodStats:
    @pytest.fixture
    def habits(self, make_habit):
        water = make_habit("Water", start_date=date(2024, 2, 1), daily_goal=2)
        run = make_habit("Run", start_date=date(2024, 2, 1), weekdays=[MON, WED, FRI])
        return water, run

    @pytest.fixture
    def records(self, habits, record_factory):
        water, run = habits
        return {
            water.id: [
                record_factory(water, date(2024, 3, 6), 2),
                record_factory(water, date(2024, 3, 5), 1),
                record_factory(water, date(2024, 3, 4), 0),
                # outside the 7-day window
                record_factory(water, date(2024, 2, 20), 2),
            ],
            run.id: [
                record_factory(run, date(2024, 3, 4), 1),
                record_factory(run, date(2024, 3, 6), 0),
            ],
        }

    def test_week_window(self, habits, records):
        stats = period_stats(habits, records, TODAY, StatsPeriod.WEEK)
        assert stats.start == date(2024, 2, 29)
        assert stats.end == TODAY
        assert len(stats.bars) == 7

    def test_tallies(self, habits, records):
        water, run = habits
        stats = period_stats(habits, records, TODAY, StatsPeriod.WEEK)
        assert (stats.perfect, stats.partial, stats.missed) == (2, 1, 2)
        assert stats.completed_by_habit == {water.id: 1, run.id: 1}

    def test_bars_average_capped_ratio_of_scheduled_habits(self, habits, records):
        stats = period_stats(habits, records, TODAY, StatsPeriod.WEEK)
        bars = {b.day: b.percent for b in stats.bars}
        assert bars[date(2024, 2, 29)] == 0.0
        assert bars[date(2024, 3, 4)] == pytest.approx(0.5)
        assert bars[date(2024, 3, 5)] == pytest.approx(0.5)
        assert bars[date(2024, 3, 6)] == pytest.approx(0.5)

    def test_average_completion(self, habits, records):
        stats = period_stats(habits, records, TODAY, StatsPeriod.WEEK)
        # two days with half the scheduled habits done, five with none
        assert stats.average_completion == 14

    def test_no_habits(self):
        stats = period_stats([], {}, TODAY, StatsPeriod.MONTH)
        assert len(stats.bars) == 30
        assert stats.average_completion == 0
        assert (stats.perfect, stats.partial, stats.missed) == (0, 0, 0)

    def test_over_completion_capped_in_bars(self, make_habit, record_factory):
        habit = make_habit(daily_goal=2)
        stats = period_stats(
            [habit], {habit.id: [record_factory(habit, TODAY, 5)]}, TODAY, StatsPeriod.WEEK
        )
        assert stats.bars[-1].percent == 1.0

    @pytest.mark.parametrize(
        "label, days", [("week", 7), ("Month", 30), (" year ", 365)]
    )
    def test_period_labels(self, label, days):
        assert StatsPeriod.from_label(label).days == days

    def test_unknown_period_label(self):
        with pytest.raises(ValueError):
            StatsPeriod.from_label("decade")


class TestCompletedHabitsCount:
    def test_counts_only_scheduled_completed(self, make_habit, record_factory):
        daily = make_habit("Read")
        mondays = make_habit("Plan", weekdays=[MON])
        records = {
            daily.id: [record_factory(daily, TODAY, 1)],
            mondays.id: [record_factory(mondays, TODAY, 1)],
        }
        assert completed_habits_count([daily, mondays], records, TODAY, TODAY) == 1
