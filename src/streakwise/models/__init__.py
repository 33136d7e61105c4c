"""SQLModel table exports."""

from .habit import HabitRow, ProgressRow

__all__ = ["HabitRow", "ProgressRow"]
