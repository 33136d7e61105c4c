"""Service layer wiring repositories, the clock and the pure domain."""

from .errors import HabitNotFoundError
from .export_csv import export_summary_csv
from .reports import ReportService
from .tracker import HabitTracker

__all__ = ["HabitNotFoundError", "HabitTracker", "ReportService", "export_summary_csv"]
