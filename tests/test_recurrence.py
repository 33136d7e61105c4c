"""Tests for recurrence rules and schedule evaluation."""

from __future__ import annotations

from datetime import date

import pytest

from streakwise.domain.calendar import enumerate_days
from streakwise.domain.entities import ActiveWindow, RecurrenceKind, RecurrenceRule
from streakwise.domain.recurrence import (
    EmptyWeekdaySetPolicy,
    active_habits_on,
    is_habit_scheduled,
    is_scheduled,
    scheduled_days,
)

TODAY = date(2024, 3, 6)  # Wednesday
MON, WED, FRI = 1, 3, 5


class TestRecurrenceRule:
    def test_daily_rejects_weekdays(self):
        with pytest.raises(ValueError):
            RecurrenceRule(RecurrenceKind.DAILY, frozenset({1}))

    @pytest.mark.parametrize("bad", [7, -1])
    def test_weekday_range_validated(self, bad):
        with pytest.raises(ValueError):
            RecurrenceRule.on_weekdays([1, bad])

    @pytest.mark.parametrize("frequency", ["weekly", "custom", "Weekdays"])
    def test_parse_weekday_frequencies(self, frequency):
        rule = RecurrenceRule.parse(frequency, [MON, FRI])
        assert rule.kind is RecurrenceKind.WEEKDAYS
        assert rule.weekdays == {MON, FRI}
        assert rule.frequency == "custom"

    def test_parse_daily_ignores_weekdays(self):
        rule = RecurrenceRule.parse("daily", [MON])
        assert rule == RecurrenceRule.daily()
        assert rule.frequency == "daily"

    def test_parse_unknown_frequency(self):
        with pytest.raises(ValueError, match="Unknown repeat frequency"):
            RecurrenceRule.parse("fortnightly")


class TestIsScheduled:
    def test_daily_is_due_every_day_in_window(self):
        window = ActiveWindow(date(2024, 3, 1))
        days = enumerate_days(date(2024, 3, 1), 6)
        assert all(is_scheduled(RecurrenceRule.daily(), window, d, TODAY) for d in days)

    def test_weekday_rule_matches_only_listed_days(self):
        rule = RecurrenceRule.on_weekdays([MON, WED, FRI])
        window = ActiveWindow(date(2024, 2, 25))
        due = scheduled_days(rule, window, enumerate_days(date(2024, 2, 25), 11), TODAY)
        assert due == [
            date(2024, 2, 26),
            date(2024, 2, 28),
            date(2024, 3, 1),
            date(2024, 3, 4),
            date(2024, 3, 6),
        ]

    def test_before_start_is_never_scheduled(self):
        window = ActiveWindow(date(2024, 3, 4))
        assert not is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 3), TODAY)
        assert is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 4), TODAY)

    def test_after_end_is_never_scheduled(self):
        window = ActiveWindow(date(2024, 3, 1), date(2024, 3, 4))
        assert is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 4), TODAY)
        assert not is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 5), TODAY)

    def test_open_ended_window_stops_at_today(self):
        window = ActiveWindow(date(2024, 3, 1))
        assert is_scheduled(RecurrenceRule.daily(), window, TODAY, TODAY)
        assert not is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 7), TODAY)

    def test_future_day_not_scheduled_even_with_future_end(self):
        window = ActiveWindow(date(2024, 3, 1), date(2024, 12, 31))
        assert not is_scheduled(RecurrenceRule.daily(), window, date(2024, 3, 7), TODAY)

    def test_empty_window_schedules_nothing(self):
        window = ActiveWindow(date(2024, 3, 5), date(2024, 3, 1))
        assert window.is_empty()
        days = enumerate_days(date(2024, 2, 28), 10)
        assert scheduled_days(RecurrenceRule.daily(), window, days, TODAY) == []


class TestEmptyWeekdaySet:
    def test_default_policy_is_every_day(self):
        rule = RecurrenceRule.on_weekdays([])
        window = ActiveWindow(date(2024, 3, 1))
        assert is_scheduled(rule, window, date(2024, 3, 2), TODAY)

    def test_never_policy(self):
        rule = RecurrenceRule.on_weekdays([])
        window = ActiveWindow(date(2024, 3, 1))
        assert not is_scheduled(
            rule, window, date(2024, 3, 2), TODAY, empty_policy=EmptyWeekdaySetPolicy.NEVER
        )


class TestHabitHelpers:
    def test_is_habit_scheduled_uses_habit_window(self, make_habit):
        habit = make_habit(start_date=date(2024, 3, 5), weekdays=[WED])
        assert is_habit_scheduled(habit, TODAY, TODAY)
        assert not is_habit_scheduled(habit, date(2024, 3, 5), TODAY)

    def test_active_habits_on(self, make_habit):
        daily = make_habit("Read")
        mwf = make_habit("Run", weekdays=[MON, WED, FRI])
        ended = make_habit("Old", end_date=date(2024, 3, 1))
        thursday = date(2024, 2, 29)
        assert active_habits_on([daily, mwf, ended], thursday, TODAY) == [daily, ended]
        assert active_habits_on([daily, mwf, ended], TODAY, TODAY) == [daily, mwf]
