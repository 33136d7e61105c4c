"""CSV export helpers for Streakwise."""

from __future__ import annotations

import csv
from pathlib import Path

from ..domain.calendar import day_key
from ..domain.summary import HabitCalendarSummary

SUMMARY_HEADERS = ["day", "scheduled", "active", "progress", "goal", "completed"]


def export_summary_csv(*, summary: HabitCalendarSummary, output_path: Path) -> Path:
    """Write a calendar summary's days to CSV at `output_path`.

    Columns are deterministic: day, scheduled, active, progress, goal, completed.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SUMMARY_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for day in summary.days:
            writer.writerow(
                {
                    "day": day_key(day.day),
                    "scheduled": int(day.scheduled),
                    "active": int(day.is_active),
                    "progress": day.progress,
                    "goal": day.goal,
                    "completed": int(day.is_active and day.completed),
                }
            )

    return output_path
