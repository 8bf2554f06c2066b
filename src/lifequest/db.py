"""SQLite key-value store for LifeQuest snapshots."""

import sqlite3
from pathlib import Path


DEFAULT_DB_PATH = Path.home() / ".lifequest" / "data.db"


class Database:
    """SQLite blob store with WAL mode. One row per key, rewritten wholesale."""

    def __init__(self, db_path: Path | None = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()

    def init_db(self) -> None:
        """Create tables if they do not exist."""
        self.conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            );
        """)
        self.conn.commit()

    def get_blob(self, key: str) -> str | None:
        """Get the stored value for a key."""
        row = self.conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_blob(self, key: str, value: str) -> None:
        """Store a value (upsert)."""
        self.conn.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, value),
        )
        self.conn.commit()

    def delete_blob(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        self.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self.conn.commit()

    def keys(self) -> list[str]:
        """Return all stored keys."""
        rows = self.conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row["key"] for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        self.conn.close()
