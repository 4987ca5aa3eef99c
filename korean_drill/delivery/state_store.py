"""
SQLite State Store.

Key-value persistence for:
- The SRS card map (one JSON document)
- The streak ledger (one JSON document)

Database location: ~/.korean-drill/state.db
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from loguru import logger

from korean_drill.core.errors import StorageError

# =============================================================================
# In-Memory Store
# =============================================================================


class MemoryStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


# =============================================================================
# State Store
# =============================================================================


class StateStore:
    """
    SQLite-backed key-value store.

    Write failures (disk full, read-only file, locked database) surface as
    StorageError so callers can degrade to in-memory state.
    """

    DEFAULT_DB_PATH = Path.home() / ".korean-drill" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the state store.

        Args:
            db_path: Custom database path (defaults to ~/.korean-drill/state.db)
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {self.db_path.parent}: {e}") from e

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"StateStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        try:
            cursor = self.conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP
                )
            """)
            self.conn.commit()
        except sqlite3.Error as e:
            self.close()
            raise StorageError(f"Cannot open database {self.db_path}: {e}") from e

    # =========================================================================
    # Key-Value Operations
    # =========================================================================

    def get(self, key: str) -> str | None:
        try:
            cursor = self.conn.cursor()
            cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        return None if row is None else row["value"]

    def set(self, key: str, value: str) -> None:
        """
        Save or update a value.

        Raises:
            StorageError: If the write cannot be committed
        """
        try:
            self.conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """,
                (key, value, datetime.now().isoformat()),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    def keys(self) -> list[str]:
        try:
            cursor = self.conn.cursor()
            cursor.execute("SELECT key FROM kv_store ORDER BY key")
            return [row["key"] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e

    # =========================================================================
    # Backups
    # =========================================================================

    def backup(self, keys: list[str] | None = None) -> Path:
        """
        Export values to a timestamped JSON file next to the database.

        Args:
            keys: Keys to export (all keys if None)

        Returns:
            Path of the backup file
        """
        backup_dir = self.db_path.parent / "backups"
        backup_dir.mkdir(exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_file = backup_dir / f"progress_backup_{timestamp}.json"

        selected = keys if keys is not None else self.keys()
        backup = {
            "timestamp": timestamp,
            "values": {key: self.get(key) for key in selected},
        }
        try:
            with open(backup_file, "w", encoding="utf-8") as f:
                json.dump(backup, f, indent=2)
        except OSError as e:
            raise StorageError(f"Failed to write backup {backup_file}: {e}") from e

        logger.info(f"Backup saved: {backup_file}")
        return backup_file

    def list_backups(self) -> list[Path]:
        """List available backup files, newest first."""
        backup_dir = self.db_path.parent / "backups"
        if not backup_dir.exists():
            return []
        return sorted(backup_dir.glob("progress_backup_*.json"), reverse=True)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
