"""Pytest configuration and shared fixtures for Streakwise tests.

Provides an isolated SQLite database per test, a fixed clock and factories
for habits and progress records, so domain logic, repositories and services
can be exercised without touching a real data directory.
"""

from __future__ import annotations

import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

import streakwise.models  # noqa: F401  registers tables
from streakwise.domain.clock import FixedClock
from streakwise.domain.entities import Habit, ProgressRecord, RecurrenceRule
from streakwise.infra.database import create_session_factory
from streakwise.infra.repositories import SQLModelHabitRepository, SQLModelProgressRepository
from streakwise.services import HabitTracker, ReportService

OWNER = "owner-1"
# Wednesday
TODAY = date(2024, 3, 6)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point config at a throwaway data dir and clear STREAKWISE_* overrides."""

    for name in (
        "STREAKWISE_DATABASE_URL",
        "STREAKWISE_DEV_MODE",
        "STREAKWISE_SUMMARY_WINDOW_DAYS",
        "STREAKWISE_EMPTY_WEEKDAYS",
        "STREAKWISE_DEFAULT_OWNER",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STREAKWISE_DATA_DIR", str(tmp_path / "data"))


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one repositories receive at runtime."""

    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory):
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def progress_repo(session_factory):
    return SQLModelProgressRepository(session_factory)


@pytest.fixture
def clock():
    """Clock pinned to midday UTC on TODAY."""

    return FixedClock(datetime(2024, 3, 6, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def tracker(habit_repo, progress_repo, clock):
    return HabitTracker(habit_repo, progress_repo, clock)


@pytest.fixture
def reports(tracker):
    return ReportService(tracker)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def make_habit():
    """Factory for in-memory habits (not persisted).

    Returns:
        Callable: Function that builds Habit instances with sensible defaults
    """

    def _make(
        title: str = "Drink water",
        *,
        start_date: date = date(2024, 1, 1),
        end_date: date | None = None,
        daily_goal: int = 1,
        weekdays: list[int] | None = None,
        owner_id: str = OWNER,
        **kwargs,
    ) -> Habit:
        rule = RecurrenceRule.daily() if weekdays is None else RecurrenceRule.on_weekdays(weekdays)
        return Habit(
            owner_id=owner_id,
            title=title,
            start_date=start_date,
            end_date=end_date,
            daily_goal=daily_goal,
            recurrence=rule,
            **kwargs,
        )

    return _make


@pytest.fixture
def habit_factory(habit_repo, make_habit):
    """Factory for persisted habits.

    Returns:
        Callable: Function that creates and stores Habit instances
    """

    def _create(title: str = "Drink water", **kwargs) -> Habit:
        return habit_repo.create(make_habit(title, **kwargs))

    return _create


@pytest.fixture
def record_factory():
    """Factory for progress records."""

    def _make(habit: Habit, day: date, progress: int, goal: int | None = None, **kwargs):
        return ProgressRecord(
            owner_id=habit.owner_id,
            habit_id=habit.id,
            day=day,
            progress=progress,
            goal=habit.daily_goal if goal is None else goal,
            **kwargs,
        )

    return _make
