"""SQLModel implementation of the progress repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from sqlmodel import select

from ...domain.entities import ProgressRecord
from ...models.habit import ProgressRow
from ..database import SessionFactory
from .habit import _aware


def row_to_record(row: ProgressRow) -> ProgressRecord:
    return ProgressRecord(
        id=row.id,
        owner_id=row.owner_id,
        habit_id=row.habit_id,
        day=row.day,
        progress=row.progress,
        goal=row.goal,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SQLModelProgressRepository:
    """Progress rows keyed uniquely by (habit_id, day)."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, habit_id: str, day: date, *, owner_id: str) -> Optional[ProgressRecord]:
        with self.session_factory() as session:
            row = session.exec(
                select(ProgressRow)
                .where(ProgressRow.owner_id == owner_id)
                .where(ProgressRow.habit_id == habit_id)
                .where(ProgressRow.day == day)
            ).first()
            return row_to_record(row) if row else None

    def fetch_range(
        self, habit_id: str, start: date, end: date, *, owner_id: str
    ) -> list[ProgressRecord]:
        """Get records for a habit within an inclusive date range."""
        with self.session_factory() as session:
            statement = (
                select(ProgressRow)
                .where(ProgressRow.owner_id == owner_id)
                .where(ProgressRow.habit_id == habit_id)
                .where(ProgressRow.day >= start)
                .where(ProgressRow.day <= end)
                .order_by(ProgressRow.day)  # type: ignore[arg-type]
            )
            return [row_to_record(row) for row in session.exec(statement).all()]

    def upsert(self, record: ProgressRecord) -> ProgressRecord:
        """Insert or overwrite the owner's row for (habit_id, day); last write wins.

        Another owner's row for the same key is never touched; inserting over it
        violates the (habit_id, day) constraint.
        """
        now = datetime.now(timezone.utc)
        with self.session_factory() as session:
            existing = session.exec(
                select(ProgressRow)
                .where(ProgressRow.owner_id == record.owner_id)
                .where(ProgressRow.habit_id == record.habit_id)
                .where(ProgressRow.day == record.day)
            ).first()

            if existing:
                existing.progress = record.progress
                existing.goal = record.goal
                existing.updated_at = now
                row = existing
            else:
                row = ProgressRow(
                    id=record.id,
                    owner_id=record.owner_id,
                    habit_id=record.habit_id,
                    day=record.day,
                    progress=record.progress,
                    goal=record.goal,
                    created_at=record.created_at or now,
                    updated_at=now,
                )
            session.add(row)
            session.commit()
            session.refresh(row)
            return row_to_record(row)
