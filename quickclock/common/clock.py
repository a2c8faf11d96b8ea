"""Clock capability — the single source of "now" and "today".

Services take a ``clock`` argument instead of calling ``datetime.now()``
so that date-boundary and scheduler logic can run against a fixed date.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime: ...

    def today(self) -> date: ...


class SystemClock:
    """Wall clock. Naive local time unless a zone name is given."""

    def __init__(self, tz_name: Optional[str] = None) -> None:
        self._tz = ZoneInfo(tz_name) if tz_name else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock frozen at a given instant (tests, back-filling scripts)."""

    def __init__(self, at: datetime | date) -> None:
        if not isinstance(at, datetime):
            at = datetime.combine(at, time(9, 0))
        self._at = at

    def now(self) -> datetime:
        return self._at

    def today(self) -> date:
        return self._at.date()

    def advance_to(self, at: datetime) -> None:
        self._at = at


_system_clock: Optional[SystemClock] = None


def get_clock() -> Clock:
    """FastAPI dependency returning the process-wide clock."""
    global _system_clock
    if _system_clock is None:
        from quickclock.config import settings

        _system_clock = SystemClock(settings.TIMEZONE)
    return _system_clock
