"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .progress import SQLModelProgressRepository

__all__ = ["SQLModelHabitRepository", "SQLModelProgressRepository"]
