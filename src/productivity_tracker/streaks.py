"""Completion streak tracking for productivity-tracker."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Mapping

from productivity_tracker.dates import days_between, parse_date
from productivity_tracker.models import DayBucket, StreakResult


def _has_completion(buckets: Mapping[str, DayBucket], day: date) -> bool:
    bucket = buckets.get(day.isoformat())
    return bucket is not None and bucket.completed > 0


def get_streak_from_date(buckets: Mapping[str, DayBucket], reference: date | str) -> int:
    """Count consecutive days with completions walking backwards from reference."""
    current = parse_date(reference)
    streak = 0
    while _has_completion(buckets, current):
        streak += 1
        current -= timedelta(days=1)
    return streak


def longest_streak(buckets: Mapping[str, DayBucket]) -> int:
    """Longest run of consecutive calendar days with at least one completion."""
    completed_dates = sorted(d for d, bucket in buckets.items() if bucket.completed > 0)
    longest = 0
    run = 0
    previous: str | None = None
    for current in completed_dates:
        if previous is not None and days_between(previous, current) == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = current
    return longest


def calculate_streak(buckets: Mapping[str, DayBucket], today: date | str) -> StreakResult:
    """Calculate current and longest streaks from a user's full day-bucket history.

    Rules:
    - A day counts when its bucket has at least one completed task
    - The current streak counts back from today, or from yesterday when today
      has no completions yet
    - Neither today nor yesterday completed -> current streak is 0
    - lastActivityDate is the latest bucket date whatever its completions
    """
    if not buckets:
        return StreakResult(
            current_streak=0,
            longest_streak=0,
            last_activity_date=None,
            streak_active=False,
        )

    today_date = parse_date(today)
    yesterday = today_date - timedelta(days=1)

    if _has_completion(buckets, today_date):
        current_streak = get_streak_from_date(buckets, today_date)
    elif _has_completion(buckets, yesterday):
        current_streak = get_streak_from_date(buckets, yesterday)
    else:
        current_streak = 0

    return StreakResult(
        current_streak=current_streak,
        longest_streak=longest_streak(buckets),
        last_activity_date=max(buckets),
        streak_active=current_streak > 0,
    )
