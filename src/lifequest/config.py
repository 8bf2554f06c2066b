"""Configuration file management for LifeQuest.

Reads and writes ~/.lifequest/config.json for settings that don't belong in
the game state (where the database lives, which key holds the snapshot).
"""
from __future__ import annotations

import json
from pathlib import Path

from lifequest.db import DEFAULT_DB_PATH

DEFAULT_CONFIG_PATH: Path = Path.home() / ".lifequest" / "config.json"
DEFAULT_STORAGE_KEY = "lifequest_gamestate"


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


def get_db_path(config_path: Path | None = None) -> Path:
    """Return the configured database path, or the default one."""
    raw = load_config(config_path).get("db_path")
    if raw:
        return Path(raw).expanduser()
    return DEFAULT_DB_PATH


def set_db_path(db_path: Path, config_path: Path | None = None) -> None:
    """Persist the database path to config."""
    config = load_config(config_path)
    config["db_path"] = str(db_path)
    save_config(config, config_path)


def get_storage_key(config_path: Path | None = None) -> str:
    """Return the key the game snapshot is stored under."""
    raw = load_config(config_path).get("storage_key")
    return str(raw) if raw else DEFAULT_STORAGE_KEY
