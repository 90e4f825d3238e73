"""Clock sources used for window computation."""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Reads the local wall clock."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Always returns the same instant. Accepts a datetime, date or ISO string."""

    def __init__(self, instant: datetime | date | str) -> None:
        if isinstance(instant, str):
            instant = datetime.fromisoformat(instant)
        elif not isinstance(instant, datetime):
            instant = datetime(instant.year, instant.month, instant.day, 12, 0, 0)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


def today(clock: Clock | None = None) -> date:
    """Return the calendar date of the clock's current instant."""
    return (clock or SystemClock()).now().date()
