"""SQLite key-value store backing the reader's four persisted records."""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

LIBRARY_KEY = "scholarverse-library"
NOTES_KEY = "scholarverse-notes"
STATS_KEY = "scholarverse-stats"
READ_PAGES_KEY = "scholarverse-read-pages"

RECORD_KEYS = (LIBRARY_KEY, NOTES_KEY, STATS_KEY, READ_PAGES_KEY)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at REAL NOT NULL
);
"""


class KeyValueStore:
    """Best-effort persistence: failures are logged, never raised to callers.

    Each record is written on its own; there is no transaction spanning keys.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def load(self, key: str) -> Optional[str]:
        try:
            row = self._conn.execute(
                "SELECT value FROM records WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            log.warning("Failed to read record %s: %s", key, e)
            return None
        return row[0] if row else None

    def save(self, key: str, value: str) -> bool:
        try:
            self._conn.execute(
                "INSERT OR REPLACE INTO records (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, time.time()),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            log.error("Failed to write record %s: %s", key, e)
            return False
        return True

    def keys(self) -> list[str]:
        rows = self._conn.execute("SELECT key FROM records ORDER BY key").fetchall()
        return [r[0] for r in rows]
