"""Calendar windows and per-day bucketing.

Pure functions. "Now" always comes from an injected clock; dates are formatted
as YYYY-MM-DD in the proleptic Gregorian calendar regardless of locale.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, NamedTuple

from productivity_tracker.clock import Clock, SystemClock
from productivity_tracker.errors import InvalidArgument
from productivity_tracker.models import ActivityRecord, DayBucket, TaskStatus

START_OF_DAY = time(0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


class Window(NamedTuple):
    """Inclusive [start, end] timestamp pair."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime | None) -> bool:
        if instant is None:
            return False
        return self.start <= _naive(instant) <= self.end

    def overlaps(self, start: datetime | None, end: datetime | None) -> bool:
        """True if [start, end] intersects the window. Open ends are unbounded."""
        if start is not None and _naive(start) > self.end:
            return False
        if end is not None and _naive(end) < self.start:
            return False
        return True


def _naive(instant: datetime) -> datetime:
    # Timestamps are compared by their own wall-clock time.
    return instant.replace(tzinfo=None) if instant.tzinfo else instant


def parse_date(value: date | datetime | str) -> date:
    """Coerce a date, datetime or ISO date/timestamp string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # The whole string must parse; trailing text is not dropped.
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as exc:
            raise InvalidArgument(f"Malformed date: {value!r}") from exc
    raise InvalidArgument(f"Malformed date: {value!r}")


def format_date(value: date | datetime | str) -> str:
    """Format as YYYY-MM-DD."""
    return parse_date(value).isoformat()


def _window(start_day: date, end_day: date) -> Window:
    return Window(
        datetime.combine(start_day, START_OF_DAY),
        datetime.combine(end_day, END_OF_DAY),
    )


def current_week_window(clock: Clock | None = None) -> Window:
    """Monday 00:00:00 through Sunday 23:59:59.999 of the current ISO week."""
    today = (clock or SystemClock()).now().date()
    monday = today - timedelta(days=today.isoweekday() - 1)
    return _window(monday, monday + timedelta(days=6))


def current_month_window(clock: Clock | None = None) -> Window:
    """First through last calendar day of the current month."""
    today = (clock or SystemClock()).now().date()
    start = today.replace(day=1)
    if today.month == 12:
        end = today.replace(month=12, day=31)
    else:
        end = today.replace(month=today.month + 1, day=1) - timedelta(days=1)
    return _window(start, end)


def last_n_days_window(n: int, clock: Clock | None = None) -> Window:
    """The n calendar days ending today, today included."""
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgument(f"Day count must be a positive integer, got {n!r}")
    today = (clock or SystemClock()).now().date()
    try:
        start = today - timedelta(days=n - 1)
    except OverflowError as exc:
        raise InvalidArgument(f"Day count {n} reaches before the first representable date") from exc
    return _window(start, today)


def today_window(clock: Clock | None = None) -> Window:
    return last_n_days_window(1, clock)


def date_range(start: date | datetime | str, end: date | datetime | str) -> list[str]:
    """Every date from start to end inclusive, ascending, as YYYY-MM-DD."""
    first = parse_date(start)
    last = parse_date(end)
    if first > last:
        raise InvalidArgument(f"Window start {first} is after end {last}")
    return [(first + timedelta(days=i)).isoformat() for i in range((last - first).days + 1)]


def group_by_day(records: Iterable[ActivityRecord]) -> dict[str, DayBucket]:
    """Bucket records by the calendar date of ``created_at``.

    Statuses other than pending/in-progress/completed increment ``total`` only.
    """
    grouped: dict[str, DayBucket] = {}
    for record in records:
        key = record.created_at.date().isoformat()
        bucket = grouped.setdefault(key, DayBucket())
        bucket.total += 1
        if record.status == TaskStatus.COMPLETED.value:
            bucket.completed += 1
        elif record.status == TaskStatus.PENDING.value:
            bucket.pending += 1
        elif record.status == TaskStatus.IN_PROGRESS.value:
            bucket.in_progress += 1
    return grouped


def days_between(a: date | datetime | str, b: date | datetime | str) -> int:
    """Absolute number of calendar days between a and b, time of day ignored."""
    return abs((parse_date(b) - parse_date(a)).days)
