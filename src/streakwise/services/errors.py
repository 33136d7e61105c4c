"""Service-level exceptions."""

from __future__ import annotations


class HabitNotFoundError(LookupError):
    """Raised when a habit id does not resolve for the requesting owner."""

    def __init__(self, habit_id: str, owner_id: str):
        super().__init__(f"Habit {habit_id!r} not found for owner {owner_id!r}")
        self.habit_id = habit_id
        self.owner_id = owner_id
