"""Habit persistence tables."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HabitRow(SQLModel, table=True):
    """A user-defined habit with its completion history and streak counters."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=64)
    owner_id: str = Field(nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=120)
    daily_goal: int = Field(default=1, nullable=False)
    repeat_frequency: str = Field(default="daily", max_length=16)
    weekdays: Optional[list[int]] = Field(default=None, sa_column=Column(JSON))
    start_date: date = Field(nullable=False)
    end_date: Optional[date] = Field(default=None)
    reminder_time: Optional[time] = Field(default=None)
    unit: Optional[str] = Field(default=None, max_length=32)
    icon: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)

    # ISO day keys, kept sorted
    completed_dates: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    last_completed_date: Optional[date] = Field(default=None)
    current_streak: int = Field(default=0, nullable=False)
    best_streak: int = Field(default=0, nullable=False)
    previous_streak: Optional[int] = Field(default=None)


class ProgressRow(SQLModel, table=True):
    """Accumulated progress for a habit on one calendar day."""

    __tablename__: ClassVar[str] = "habit_progress"
    __table_args__ = (UniqueConstraint("habit_id", "day", name="uq_habit_progress_day"),)

    id: str = Field(primary_key=True, max_length=64)
    owner_id: str = Field(nullable=False, index=True, max_length=64)
    habit_id: str = Field(foreign_key="habit.id", nullable=False, index=True)
    day: date = Field(nullable=False, index=True)
    progress: int = Field(default=0, nullable=False)
    goal: int = Field(default=1, nullable=False)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
