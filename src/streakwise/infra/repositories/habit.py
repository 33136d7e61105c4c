"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session, select

from ...domain.calendar import day_key, parse_day_key
from ...domain.entities import Habit, RecurrenceKind, RecurrenceRule
from ...models.habit import HabitRow, ProgressRow
from ..database import SessionFactory


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def habit_to_row(habit: Habit, row: Optional[HabitRow] = None) -> HabitRow:
    row = row or HabitRow(id=habit.id, owner_id=habit.owner_id, title=habit.title,
                          start_date=habit.start_date)
    row.owner_id = habit.owner_id
    row.title = habit.title
    row.daily_goal = habit.daily_goal
    row.repeat_frequency = habit.recurrence.frequency
    row.weekdays = (
        sorted(habit.recurrence.weekdays)
        if habit.recurrence.kind is RecurrenceKind.WEEKDAYS
        else None
    )
    row.start_date = habit.start_date
    row.end_date = habit.end_date
    row.reminder_time = habit.reminder_time
    row.unit = habit.unit
    row.icon = habit.icon
    row.created_at = habit.created_at
    row.completed_dates = [day_key(d) for d in sorted(habit.completed_dates)]
    row.last_completed_date = habit.last_completed_date
    row.current_streak = habit.current_streak
    row.best_streak = habit.best_streak
    row.previous_streak = habit.previous_streak
    return row


def row_to_habit(row: HabitRow) -> Habit:
    return Habit(
        id=row.id,
        owner_id=row.owner_id,
        title=row.title,
        daily_goal=row.daily_goal,
        recurrence=RecurrenceRule.parse(row.repeat_frequency, row.weekdays),
        start_date=row.start_date,
        end_date=row.end_date,
        reminder_time=row.reminder_time,
        unit=row.unit,
        icon=row.icon,
        created_at=_aware(row.created_at),
        completed_dates=frozenset(parse_day_key(d) for d in row.completed_dates or ()),
        last_completed_date=row.last_completed_date,
        current_streak=row.current_streak,
        best_streak=row.best_streak,
        previous_streak=row.previous_streak,
    )


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _fetch(session: Session, habit_id: str, owner_id: str) -> Optional[HabitRow]:
        return session.exec(
            select(HabitRow).where(HabitRow.id == habit_id, HabitRow.owner_id == owner_id)
        ).first()

    def get(self, habit_id: str, *, owner_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            row = self._fetch(session, habit_id, owner_id)
            return row_to_habit(row) if row else None

    def list_all(self, owner_id: str) -> list[Habit]:
        """List an owner's habits, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(HabitRow)
                .where(HabitRow.owner_id == owner_id)
                .order_by(HabitRow.created_at, HabitRow.title)  # type: ignore[arg-type]
            )
            return [row_to_habit(row) for row in session.exec(statement).all()]

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            row = habit_to_row(habit)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row_to_habit(row)

    def update(self, habit: Habit) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            existing = self._fetch(session, habit.id, habit.owner_id)
            if existing is None:
                raise LookupError(f"Habit {habit.id} does not exist")
            row = habit_to_row(habit, existing)
            session.add(row)
            session.commit()
            session.refresh(row)
            return row_to_habit(row)

    def delete(self, habit_id: str, *, owner_id: str) -> None:
        """Delete a habit and its progress rows."""
        with self.session_factory() as session:
            row = self._fetch(session, habit_id, owner_id)
            if row is None:
                return
            for progress in session.exec(
                select(ProgressRow).where(ProgressRow.habit_id == habit_id)
            ).all():
                session.delete(progress)
            session.delete(row)
            session.commit()
