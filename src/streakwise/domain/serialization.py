"""JSON-shaped dict conversion for the hosting app's REST contract.

Keys are snake_case; day fields use ``yyyy-MM-dd`` and timestamps ISO-8601.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from .calendar import REFERENCE_TZ, day_key, parse_day_key
from .entities import Habit, ProgressRecord, RecurrenceKind, RecurrenceRule


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        stamp = value
    else:
        stamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=REFERENCE_TZ)
    return stamp


def _parse_day(value: Any) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_day_key(str(value))


def _optional_int(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    return int(value)


def habit_to_dict(habit: Habit) -> dict[str, Any]:
    weekdays = sorted(habit.recurrence.weekdays)
    return {
        "id": habit.id,
        "user_id": habit.owner_id,
        "name": habit.title,
        "daily_goal": habit.daily_goal,
        "repeat_frequency": habit.recurrence.frequency,
        "weekdays": weekdays if habit.recurrence.kind is RecurrenceKind.WEEKDAYS else None,
        "start_date": day_key(habit.start_date),
        "end_date": day_key(habit.end_date) if habit.end_date else None,
        "reminder_time": habit.reminder_time.strftime("%H:%M") if habit.reminder_time else None,
        "unit": habit.unit,
        "icon": habit.icon,
        "created_at": _iso(habit.created_at),
        "completed_dates": [day_key(d) for d in sorted(habit.completed_dates)],
        "last_completed_date": (
            day_key(habit.last_completed_date) if habit.last_completed_date else None
        ),
        "current_streak": habit.current_streak,
        "best_streak": habit.best_streak,
        "previous_streak": habit.previous_streak,
    }


def habit_from_dict(data: dict[str, Any]) -> Habit:
    """Build a habit from a REST payload; missing streak fields default to zero."""

    rule = RecurrenceRule.parse(data.get("repeat_frequency") or "daily", data.get("weekdays"))
    reminder = data.get("reminder_time")
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    created_at = _parse_ts(data.get("created_at"))
    if created_at is not None:
        kwargs["created_at"] = created_at
    return Habit(
        owner_id=str(data["user_id"]),
        title=data["name"],
        start_date=_parse_day(data["start_date"]),
        end_date=_parse_day(data.get("end_date")),
        daily_goal=int(data.get("daily_goal", 1)),
        recurrence=rule,
        reminder_time=time.fromisoformat(reminder) if reminder else None,
        unit=data.get("unit"),
        icon=data.get("icon"),
        completed_dates=frozenset(_parse_day(d) for d in data.get("completed_dates") or ()),
        last_completed_date=_parse_day(data.get("last_completed_date")),
        current_streak=int(data.get("current_streak") or 0),
        best_streak=int(data.get("best_streak") or 0),
        previous_streak=_optional_int(data.get("previous_streak")),
        **kwargs,
    )


def progress_to_dict(record: ProgressRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.owner_id,
        "habit_id": record.habit_id,
        "date": day_key(record.day),
        "progress": record.progress,
        "goal": record.goal,
        "created_at": _iso(record.created_at),
        "updated_at": _iso(record.updated_at),
    }


def progress_from_dict(data: dict[str, Any]) -> ProgressRecord:
    kwargs: dict[str, Any] = {}
    if data.get("id"):
        kwargs["id"] = str(data["id"])
    return ProgressRecord(
        owner_id=str(data["user_id"]),
        habit_id=str(data["habit_id"]),
        day=_parse_day(data["date"]),
        progress=int(data["progress"]),
        goal=int(data["goal"]),
        created_at=_parse_ts(data.get("created_at")),
        updated_at=_parse_ts(data.get("updated_at")),
        **kwargs,
    )


__all__ = ["habit_from_dict", "habit_to_dict", "progress_from_dict", "progress_to_dict"]
