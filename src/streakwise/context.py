"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.clock import Clock, SystemClock
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelProgressRepository
from .services import HabitTracker, ReportService


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory
    clock: Clock

    habit_repo: SQLModelHabitRepository
    progress_repo: SQLModelProgressRepository

    tracker: HabitTracker
    reports: ReportService

    owner_id: str

    def dispose(self) -> None:
        self.engine.dispose()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
    owner_id: Optional[str] = None,
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()
    clock = clock or SystemClock()

    engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    progress_repo = SQLModelProgressRepository(session_factory)
    tracker = HabitTracker(habit_repo, progress_repo, clock)
    reports = ReportService(
        tracker,
        window_days=config.SUMMARY_WINDOW_DAYS,
        empty_policy=config.EMPTY_WEEKDAY_POLICY,
    )

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        clock=clock,
        habit_repo=habit_repo,
        progress_repo=progress_repo,
        tracker=tracker,
        reports=reports,
        owner_id=owner_id or config.DEFAULT_OWNER,
    )
