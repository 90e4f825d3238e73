"""Record types read by the analytics engine and the values it produces.

Records are built from the JSON shape used by the web consumers (camelCase
keys, ISO timestamps) via ``from_dict``. Derived values serialize back to that
shape via ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from productivity_tracker.errors import InvalidArgument


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"


class Period(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Mood(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEUTRAL = "neutral"
    CHALLENGING = "challenging"
    DIFFICULT = "difficult"


class InsightType(str, Enum):
    POSITIVE = "positive"
    IMPROVEMENT = "improvement"
    INFO = "info"
    MOTIVATION = "motivation"
    SUGGESTION = "suggestion"


SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")
SKILL_CATEGORIES = ("programming", "language", "music", "art", "sport", "business", "other")


def parse_timestamp(value: datetime | date | str | None) -> datetime:
    """Parse an ISO timestamp (a trailing ``Z`` is accepted) into a naive datetime.

    Offsets are dropped, keeping the wall-clock time as written, so records
    parsed from mixed sources always compare with each other.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"Invalid timestamp: {value!r}")
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError as exc:
        raise InvalidArgument(f"Invalid timestamp: {value!r}") from exc


def _optional_timestamp(value) -> datetime | None:
    return parse_timestamp(value) if value else None


@dataclass
class ActivityRecord:
    """One task. ``status`` stays a raw string so unknown values survive."""

    id: str
    owner_id: str
    created_at: datetime
    status: str = TaskStatus.PENDING.value
    priority: str = Priority.MEDIUM.value
    title: str = ""

    @classmethod
    def from_dict(cls, data: dict, owner_id: str | None = None) -> ActivityRecord:
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            owner_id=str(owner_id or data.get("ownerId") or data.get("user") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
            status=str(data.get("status", TaskStatus.PENDING.value)),
            priority=str(data.get("priority", Priority.MEDIUM.value)),
            title=data.get("title", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "createdAt": self.created_at.isoformat(),
            "status": self.status,
            "priority": self.priority,
            "title": self.title,
        }


@dataclass
class GoalRecord:
    id: str
    owner_id: str
    status: str = GoalStatus.ACTIVE.value
    progress: int = 0  # 0..100
    period: str = Period.MONTHLY.value
    start_date: datetime | None = None
    end_date: datetime | None = None
    title: str = ""

    @classmethod
    def from_dict(cls, data: dict, owner_id: str | None = None) -> GoalRecord:
        progress = data.get("progress")
        if progress is None:
            # Goals may carry current/target instead of a stored progress.
            target = data.get("target", 0) or 0
            current = data.get("current", 0) or 0
            from productivity_tracker.metrics import percentage
            progress = percentage(current, target)
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            owner_id=str(owner_id or data.get("ownerId") or data.get("user") or ""),
            status=str(data.get("status", GoalStatus.ACTIVE.value)),
            progress=int(progress),
            period=str(data.get("period", Period.MONTHLY.value)),
            start_date=_optional_timestamp(data.get("startDate")),
            end_date=_optional_timestamp(data.get("endDate")),
            title=data.get("title", ""),
        )


@dataclass
class SkillRecord:
    id: str
    owner_id: str
    total_hours: float = 0.0
    practice_log_count: int = 0
    is_active: bool = True
    level: str = "beginner"
    category: str = "other"
    name: str = ""
    target_hours: float = 100.0

    @property
    def progress(self) -> int:
        """Percent of target hours reached, capped at 100."""
        from productivity_tracker.metrics import percentage
        return min(percentage(self.total_hours, self.target_hours), 100)

    @classmethod
    def from_dict(cls, data: dict, owner_id: str | None = None) -> SkillRecord:
        logs = data.get("practiceLogs")
        log_count = len(logs) if isinstance(logs, list) else data.get("practiceLogCount", 0)
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            owner_id=str(owner_id or data.get("ownerId") or data.get("user") or ""),
            total_hours=float(data.get("totalHours", 0.0)),
            practice_log_count=int(log_count or 0),
            is_active=bool(data.get("isActive", True)),
            level=str(data.get("level", "beginner")),
            category=str(data.get("category", "other")),
            name=data.get("name", ""),
            target_hours=float(data.get("targetHours", 100.0)),
        )


@dataclass
class ReflectionRecord:
    id: str
    owner_id: str
    week_start_date: datetime
    week_rating: int = 5  # 1..10
    mood: str = Mood.NEUTRAL.value
    is_complete: bool = False
    productivity_rating: int | None = None
    health_rating: int | None = None
    wins: list[str] = field(default_factory=list)
    challenges: list[str] = field(default_factory=list)
    lessons: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict, owner_id: str | None = None) -> ReflectionRecord:
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            owner_id=str(owner_id or data.get("ownerId") or data.get("user") or ""),
            week_start_date=parse_timestamp(data.get("weekStartDate")),
            week_rating=int(data.get("weekRating", 5)),
            mood=str(data.get("mood", Mood.NEUTRAL.value)),
            is_complete=bool(data.get("isComplete", False)),
            productivity_rating=data.get("productivityRating"),
            health_rating=data.get("healthRating"),
            wins=list(data.get("wins", [])),
            challenges=list(data.get("challenges", [])),
            lessons=list(data.get("lessons", [])),
        )


@dataclass
class DayBucket:
    """Task counts for one calendar day.

    ``completed + pending + in_progress <= total``: statuses outside the three
    known values are counted in ``total`` only.
    """

    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "inProgress": self.in_progress,
        }


@dataclass
class StreakResult:
    current_streak: int
    longest_streak: int
    last_activity_date: str | None  # YYYY-MM-DD
    streak_active: bool

    def to_dict(self) -> dict:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastActivityDate": self.last_activity_date,
            "streakActive": self.streak_active,
        }


@dataclass
class Insight:
    type: InsightType
    category: str
    title: str
    message: str
    icon: str

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "category": self.category,
            "title": self.title,
            "message": self.message,
            "icon": self.icon,
        }
