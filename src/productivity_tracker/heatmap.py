"""Activity calendar heatmap."""

from __future__ import annotations

from typing import Mapping

from productivity_tracker.dates import Window, date_range
from productivity_tracker.metrics import percentage
from productivity_tracker.models import DayBucket

# (minimum completed, intensity), highest first
INTENSITY_THRESHOLDS: list[tuple[int, int]] = [(10, 4), (7, 3), (4, 2), (1, 1)]


def intensity(completed: int) -> int:
    """Map a day's completed count to a 0..4 colouring level."""
    for minimum, level in INTENSITY_THRESHOLDS:
        if completed >= minimum:
            return level
    return 0


def build_heatmap(window: Window, buckets: Mapping[str, DayBucket]) -> dict:
    """One cell per date in the window plus summary statistics."""
    cells: list[dict] = []
    for day in date_range(window.start, window.end):
        bucket = buckets.get(day) or DayBucket()
        cells.append({
            "date": day,
            "count": bucket.total,
            "completed": bucket.completed,
            "pending": bucket.pending,
            "inProgress": bucket.in_progress,
            "intensity": intensity(bucket.completed),
        })

    # Strict > in date order: the earliest of equally good days wins.
    best = cells[0]
    for cell in cells[1:]:
        if cell["completed"] > best["completed"]:
            best = cell

    total_days = len(cells)
    active_days = sum(1 for c in cells if c["count"] > 0)

    return {
        "heatmap": cells,
        "summary": {
            "totalDays": total_days,
            "activeDays": active_days,
            "totalCompleted": sum(c["completed"] for c in cells),
            "activityRate": percentage(active_days, total_days),
            "bestDay": {"date": best["date"], "completed": best["completed"]},
        },
    }
