"""SQLite storage layer for productivity-tracker.

Every query is scoped by owner_id. Row order is unspecified; the analytics
engine never relies on it.
"""

import json
import logging
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path

from productivity_tracker.errors import InvalidArgument
from productivity_tracker.models import (
    ActivityRecord,
    GoalRecord,
    ReflectionRecord,
    SkillRecord,
    TaskStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".productivity-tracker" / "data.db"


def _ts(value: datetime | None) -> str | None:
    """Store timestamps as naive wall-clock ISO strings so they compare as text."""
    if value is None:
        return None
    return value.replace(tzinfo=None).isoformat()


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _new_id() -> str:
    return uuid.uuid4().hex


def _build_record(build, entry, owner_id: str, label: str):
    if not isinstance(entry, dict):
        raise InvalidArgument(f"{label} must be an object, got {type(entry).__name__}")
    try:
        return build(entry, owner_id=owner_id)
    except InvalidArgument:
        raise
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"{label} is malformed: {exc}") from exc


class Database:
    """SQLite database manager with WAL mode."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()
        logger.debug("Opened database at %s", self.db_path)

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                title TEXT DEFAULT '',
                status TEXT NOT NULL DEFAULT 'pending',
                priority TEXT NOT NULL DEFAULT 'medium',
                created_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS goals (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                title TEXT DEFAULT '',
                status TEXT NOT NULL DEFAULT 'active',
                progress INTEGER DEFAULT 0,
                period TEXT NOT NULL DEFAULT 'monthly',
                start_date TEXT,
                end_date TEXT
            );

            CREATE TABLE IF NOT EXISTS skills (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                name TEXT DEFAULT '',
                total_hours REAL DEFAULT 0.0,
                practice_log_count INTEGER DEFAULT 0,
                is_active BOOLEAN DEFAULT 1,
                level TEXT DEFAULT 'beginner',
                category TEXT DEFAULT 'other',
                target_hours REAL DEFAULT 100.0
            );

            CREATE TABLE IF NOT EXISTS reflections (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                week_start_date TEXT NOT NULL,
                week_rating INTEGER DEFAULT 5,
                mood TEXT DEFAULT 'neutral',
                is_complete BOOLEAN DEFAULT 0,
                productivity_rating INTEGER,
                health_rating INTEGER,
                wins TEXT DEFAULT '[]',
                challenges TEXT DEFAULT '[]',
                lessons TEXT DEFAULT '[]'
            );

            CREATE INDEX IF NOT EXISTS idx_tasks_owner_created ON tasks (owner_id, created_at);
            CREATE INDEX IF NOT EXISTS idx_goals_owner ON goals (owner_id);
            CREATE INDEX IF NOT EXISTS idx_skills_owner ON skills (owner_id);
            CREATE INDEX IF NOT EXISTS idx_reflections_owner ON reflections (owner_id, week_start_date);
        """)
        self.conn.commit()

    # -- tasks --------------------------------------------------------------

    def add_task(self, task: ActivityRecord, commit: bool = True) -> ActivityRecord:
        """Insert a task, assigning an id when it has none."""
        if not task.id:
            task.id = _new_id()
        self.conn.execute(
            "INSERT INTO tasks (id, owner_id, title, status, priority, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (task.id, task.owner_id, task.title, task.status, task.priority, _ts(task.created_at)),
        )
        if commit:
            self.conn.commit()
        return task

    def find_tasks(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[ActivityRecord]:
        """Tasks of one owner, optionally limited to created_at in [start, end]."""
        query = "SELECT * FROM tasks WHERE owner_id = ?"
        params: list = [owner_id]
        if start is not None:
            query += " AND created_at >= ?"
            params.append(_ts(start))
        if end is not None:
            query += " AND created_at <= ?"
            params.append(_ts(end))
        rows = self.conn.execute(query, params).fetchall()
        return [
            ActivityRecord(
                id=row["id"],
                owner_id=row["owner_id"],
                created_at=_dt(row["created_at"]),
                status=row["status"],
                priority=row["priority"],
                title=row["title"] or "",
            )
            for row in rows
        ]

    def update_task_status(self, owner_id: str, task_id: str, status: str) -> bool:
        """Set a task's status. Returns False if the owner has no such task."""
        valid = {s.value for s in TaskStatus}
        if status not in valid:
            raise InvalidArgument(f"Unknown task status {status!r}; expected one of {sorted(valid)}")
        cursor = self.conn.execute(
            "UPDATE tasks SET status = ? WHERE id = ? AND owner_id = ?",
            (status, task_id, owner_id),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def delete_task(self, owner_id: str, task_id: str) -> bool:
        """Delete a task. Returns False if the owner has no such task."""
        cursor = self.conn.execute(
            "DELETE FROM tasks WHERE id = ? AND owner_id = ?", (task_id, owner_id)
        )
        self.conn.commit()
        return cursor.rowcount > 0

    # -- goals --------------------------------------------------------------

    def add_goal(self, goal: GoalRecord, commit: bool = True) -> GoalRecord:
        if not goal.id:
            goal.id = _new_id()
        self.conn.execute(
            "INSERT INTO goals (id, owner_id, title, status, progress, period, start_date, end_date) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                goal.id, goal.owner_id, goal.title, goal.status, goal.progress,
                goal.period, _ts(goal.start_date), _ts(goal.end_date),
            ),
        )
        if commit:
            self.conn.commit()
        return goal

    def find_goals(self, owner_id: str, status: str | None = None) -> list[GoalRecord]:
        query = "SELECT * FROM goals WHERE owner_id = ?"
        params: list = [owner_id]
        if status is not None:
            query += " AND status = ?"
            params.append(status)
        rows = self.conn.execute(query, params).fetchall()
        return [
            GoalRecord(
                id=row["id"],
                owner_id=row["owner_id"],
                status=row["status"],
                progress=row["progress"],
                period=row["period"],
                start_date=_dt(row["start_date"]),
                end_date=_dt(row["end_date"]),
                title=row["title"] or "",
            )
            for row in rows
        ]

    # -- skills -------------------------------------------------------------

    def add_skill(self, skill: SkillRecord, commit: bool = True) -> SkillRecord:
        if not skill.id:
            skill.id = _new_id()
        self.conn.execute(
            "INSERT INTO skills (id, owner_id, name, total_hours, practice_log_count, is_active, "
            "level, category, target_hours) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                skill.id, skill.owner_id, skill.name, skill.total_hours, skill.practice_log_count,
                skill.is_active, skill.level, skill.category, skill.target_hours,
            ),
        )
        if commit:
            self.conn.commit()
        return skill

    def find_skills(self, owner_id: str, active: bool | None = None) -> list[SkillRecord]:
        query = "SELECT * FROM skills WHERE owner_id = ?"
        params: list = [owner_id]
        if active is not None:
            query += " AND is_active = ?"
            params.append(active)
        rows = self.conn.execute(query, params).fetchall()
        return [
            SkillRecord(
                id=row["id"],
                owner_id=row["owner_id"],
                total_hours=row["total_hours"],
                practice_log_count=row["practice_log_count"],
                is_active=bool(row["is_active"]),
                level=row["level"],
                category=row["category"],
                name=row["name"] or "",
                target_hours=row["target_hours"],
            )
            for row in rows
        ]

    # -- reflections --------------------------------------------------------

    def add_reflection(self, reflection: ReflectionRecord, commit: bool = True) -> ReflectionRecord:
        if not reflection.id:
            reflection.id = _new_id()
        self.conn.execute(
            "INSERT INTO reflections (id, owner_id, week_start_date, week_rating, mood, is_complete, "
            "productivity_rating, health_rating, wins, challenges, lessons) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                reflection.id, reflection.owner_id, _ts(reflection.week_start_date),
                reflection.week_rating, reflection.mood, reflection.is_complete,
                reflection.productivity_rating, reflection.health_rating,
                json.dumps(reflection.wins), json.dumps(reflection.challenges),
                json.dumps(reflection.lessons),
            ),
        )
        if commit:
            self.conn.commit()
        return reflection

    def find_reflections(
        self, owner_id: str, start: datetime | None = None, end: datetime | None = None
    ) -> list[ReflectionRecord]:
        query = "SELECT * FROM reflections WHERE owner_id = ?"
        params: list = [owner_id]
        if start is not None:
            query += " AND week_start_date >= ?"
            params.append(_ts(start))
        if end is not None:
            query += " AND week_start_date <= ?"
            params.append(_ts(end))
        rows = self.conn.execute(query, params).fetchall()
        return [
            ReflectionRecord(
                id=row["id"],
                owner_id=row["owner_id"],
                week_start_date=_dt(row["week_start_date"]),
                week_rating=row["week_rating"],
                mood=row["mood"],
                is_complete=bool(row["is_complete"]),
                productivity_rating=row["productivity_rating"],
                health_rating=row["health_rating"],
                wins=json.loads(row["wins"] or "[]"),
                challenges=json.loads(row["challenges"] or "[]"),
                lessons=json.loads(row["lessons"] or "[]"),
            )
            for row in rows
        ]

    # -- bulk ---------------------------------------------------------------

    def import_records(self, owner_id: str, payload: dict) -> dict[str, int]:
        """Load a JSON export ({"tasks": [...], "goals": [...], ...}) for one owner.

        Every record is assigned to owner_id whatever owner it carried. The
        import is all-or-nothing: a malformed entry or an id that is already
        stored raises InvalidArgument and rolls back every row of the import.
        """
        if not isinstance(payload, dict):
            raise InvalidArgument("Import payload must be a JSON object")
        loaders = {
            "tasks": (ActivityRecord.from_dict, self.add_task),
            "goals": (GoalRecord.from_dict, self.add_goal),
            "skills": (SkillRecord.from_dict, self.add_skill),
            "reflections": (ReflectionRecord.from_dict, self.add_reflection),
        }
        counts: dict[str, int] = {}
        try:
            with self.conn:
                for key, (build, add) in loaders.items():
                    entries = payload.get(key, [])
                    if not isinstance(entries, list):
                        raise InvalidArgument(f"'{key}' must be a list")
                    for index, entry in enumerate(entries):
                        add(_build_record(build, entry, owner_id, f"{key}[{index}]"), commit=False)
                    counts[key] = len(entries)
        except sqlite3.IntegrityError as exc:
            raise InvalidArgument(f"Import rejected, a record id is already stored: {exc}") from exc
        logger.info("Imported %s for owner %s", counts, owner_id)
        return counts

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
