"""Habit repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ..entities import Habit


class HabitRepository(Protocol):
    """Repository for obtaining and persisting habit snapshots."""

    def get(self, habit_id: str, *, owner_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, owner_id: str) -> list[Habit]:
        """List an owner's habits ordered by creation time."""
        ...

    def create(self, habit: Habit) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit) -> Habit:
        """Persist a mutated habit snapshot."""
        ...

    def delete(self, habit_id: str, *, owner_id: str) -> None:
        """Delete a habit and its progress history."""
        ...
