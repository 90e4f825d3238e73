"""Day-of-week and priority patterns with recommendations."""

from __future__ import annotations

from typing import Iterable

from productivity_tracker.dates import Window
from productivity_tracker.metrics import in_window, percentage, round_half_up
from productivity_tracker.models import ActivityRecord, Priority, TaskStatus
from productivity_tracker.rollups import DAY_NAMES, day_name

WEEKS_PER_MONTH = 4.3
NOT_ENOUGH_DATA = "Not enough data yet. Complete some tasks to see patterns!"


def _rated(total: int, completed: int) -> dict:
    return {"total": total, "completed": completed, "completionRate": percentage(completed, total)}


def productivity_patterns(window: Window, tasks: Iterable[ActivityRecord]) -> dict:
    """Completion patterns by weekday and priority over the window."""
    tasks = in_window(window, tasks)
    if not tasks:
        return {"message": NOT_ENOUGH_DATA}

    day_totals = {name: [0, 0] for name in DAY_NAMES}
    priority_totals = {p.value: [0, 0] for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)}
    for task in tasks:
        done = task.status == TaskStatus.COMPLETED.value
        counts = day_totals[day_name(task.created_at)]
        counts[0] += 1
        counts[1] += done
        # Unknown priorities are left out of the breakdown.
        if task.priority in priority_totals:
            priority_totals[task.priority][0] += 1
            priority_totals[task.priority][1] += done

    analysis = {name: _rated(*day_totals[name]) for name in DAY_NAMES}

    best: dict | None = None
    worst: dict | None = None
    for name in DAY_NAMES:
        day = analysis[name]
        if day["total"] == 0:
            continue
        rate = day["completionRate"]
        if rate > (best["rate"] if best else 0):
            best = {"name": name, "rate": rate}
        if rate < (worst["rate"] if worst else 100):
            worst = {"name": name, "rate": rate}

    recommendations: list[dict] = []
    if best and best["rate"] >= 80:
        recommendations.append({
            "type": "optimize",
            "message": f"Schedule important tasks on {best['name']}s ({best['rate']}% completion rate)",
        })
    if worst and worst["rate"] < 50:
        recommendations.append({
            "type": "improve",
            "message": (
                f"{worst['name']}s need attention ({worst['rate']}% completion rate). "
                "Try lighter workload or better planning."
            ),
        })

    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED.value)
    return {
        "dayOfWeek": {"analysis": analysis, "bestDay": best, "worstDay": worst},
        "priority": {p: _rated(*counts) for p, counts in priority_totals.items()},
        "weeklyAverages": {
            "tasksPerWeek": round_half_up(len(tasks) / WEEKS_PER_MONTH),
            "completedPerWeek": round_half_up(completed / WEEKS_PER_MONTH),
        },
        "recommendations": recommendations,
    }
