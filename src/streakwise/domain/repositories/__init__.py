"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .progress import ProgressRepository

__all__ = ["HabitRepository", "ProgressRepository"]
