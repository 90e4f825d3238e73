"""Configuration file management for productivity-tracker.

Reads and writes ~/.productivity-tracker/config.json for settings that don't
belong in the DB (database location, default owner, report windows).
"""
from __future__ import annotations

import json
from pathlib import Path

DEFAULT_CONFIG_PATH: Path = Path.home() / ".productivity-tracker" / "config.json"

DEFAULTS: dict = {
    "db_path": None,
    "default_owner": "me",
    "heatmap_days": 365,
    "consistency_days": 30,
    "insight_days": 30,
}


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def get_setting(key: str, config_path: Path | None = None):
    """Return a configured value, falling back to DEFAULTS."""
    config = load_config(config_path)
    value = config.get(key)
    return value if value is not None else DEFAULTS.get(key)


def get_db_path(config_path: Path | None = None) -> Path | None:
    """Return the configured database path, or None for the default location."""
    raw = get_setting("db_path", config_path)
    if raw:
        return Path(raw).expanduser()
    return None


def set_default_owner(owner: str, config_path: Path | None = None) -> None:
    """Persist the owner used when --owner is not given."""
    config = load_config(config_path)
    config["default_owner"] = owner
    save_config(config, config_path)
