"""Progress repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..entities import ProgressRecord


class ProgressRepository(Protocol):
    """Per-(habit, day) progress rows.

    ``upsert`` must overwrite any existing row for the same habit and day.
    """

    def get(self, habit_id: str, day: date, *, owner_id: str) -> Optional[ProgressRecord]:
        """Get the record for one habit on one day."""
        ...

    def fetch_range(
        self, habit_id: str, start: date, end: date, *, owner_id: str
    ) -> list[ProgressRecord]:
        """Records for a habit with ``start <= day <= end``, ordered by day."""
        ...

    def upsert(self, record: ProgressRecord) -> ProgressRecord:
        """Insert or replace the record for (habit_id, day)."""
        ...
