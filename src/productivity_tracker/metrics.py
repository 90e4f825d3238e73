"""Percentages and the consistency score.

Rounding is half-up throughout (``percentage(1, 8) == 13``), matching the
JavaScript ``Math.round`` the existing consumers were built against, rather
than Python's round-half-even.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Iterable

from productivity_tracker.dates import Window, date_range, group_by_day
from productivity_tracker.models import ActivityRecord, TaskStatus

ACTIVITY_WEIGHT = Fraction(3, 10)
COMPLETION_WEIGHT = Fraction(4, 10)
TASK_COMPLETION_WEIGHT = Fraction(3, 10)


def round_half_up(value: Fraction | float | int) -> int:
    return math.floor(Fraction(value) + Fraction(1, 2))


def percentage(part: float, total: float) -> int:
    """round(100 * part / total) in 0..100; 0 when total is 0."""
    if total == 0:
        return 0
    return round_half_up(Fraction(part) * 100 / Fraction(total))


def in_window(window: Window, records: Iterable[ActivityRecord]) -> list[ActivityRecord]:
    """Records whose created_at falls inside the window."""
    return [r for r in records if window.contains(r.created_at)]


def count_status(records: Iterable[ActivityRecord], status: TaskStatus) -> int:
    return sum(1 for r in records if r.status == status.value)


def consistency_score(window: Window, records: Iterable[ActivityRecord]) -> dict:
    """Weighted 0..100 score of how regularly tasks were created and completed.

    score = 0.3 * activityRate + 0.4 * completionRate + 0.3 * taskCompletionRate
    where the first two are shares of days in the window and the last is the
    share of created tasks that were completed.
    """
    tasks = in_window(window, records)
    by_day = group_by_day(tasks)
    all_dates = date_range(window.start, window.end)

    days_with_activity = 0
    days_with_completed = 0
    total_completed = 0
    for day in all_dates:
        bucket = by_day.get(day)
        if bucket is None:
            continue
        if bucket.total > 0:
            days_with_activity += 1
        if bucket.completed > 0:
            days_with_completed += 1
        total_completed += bucket.completed

    activity_rate = percentage(days_with_activity, len(all_dates))
    completion_rate = percentage(days_with_completed, len(all_dates))
    task_completion_rate = percentage(total_completed, len(tasks))

    score = round_half_up(
        ACTIVITY_WEIGHT * activity_rate
        + COMPLETION_WEIGHT * completion_rate
        + TASK_COMPLETION_WEIGHT * task_completion_rate
    )

    return {
        "consistencyScore": score,
        "period": f"{len(all_dates)} days",
        "metrics": {
            "daysWithActivity": days_with_activity,
            "daysWithCompletedTasks": days_with_completed,
            "totalDays": len(all_dates),
            "activityRate": activity_rate,
            "completionRate": completion_rate,
            "taskCompletionRate": task_completion_rate,
        },
    }
