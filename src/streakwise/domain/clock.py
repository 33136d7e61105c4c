"""Injectable clock capability."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol

from .calendar import REFERENCE_TZ, start_of_day


class Clock(Protocol):
    """Supplies the current instant and the current reference day."""

    def now(self) -> datetime:  # pragma: no cover - interface
        ...

    def today(self) -> date:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall clock in the UTC reference calendar."""

    def now(self) -> datetime:
        return datetime.now(REFERENCE_TZ)

    def today(self) -> date:
        return start_of_day(self.now())


class FixedClock:
    """Manually driven clock for tests and replays."""

    def __init__(self, instant: datetime | date):
        self._instant = self._coerce(instant)

    @staticmethod
    def _coerce(instant: datetime | date) -> datetime:
        if isinstance(instant, datetime):
            if instant.tzinfo is None:
                return instant.replace(tzinfo=REFERENCE_TZ)
            return instant.astimezone(REFERENCE_TZ)
        return datetime(instant.year, instant.month, instant.day, 12, tzinfo=REFERENCE_TZ)

    def now(self) -> datetime:
        return self._instant

    def today(self) -> date:
        return start_of_day(self._instant)

    def set(self, instant: datetime | date) -> None:
        self._instant = self._coerce(instant)

    def advance(self, *, days: int = 0, hours: int = 0) -> None:
        self._instant = self._instant + timedelta(days=days, hours=hours)


__all__ = ["Clock", "FixedClock", "SystemClock"]
