from __future__ import annotations

import json
import sqlite3
import threading
from datetime import UTC, timedelta
from pathlib import Path
from typing import Any

from reqbridge.application.ports.clock_port import Clock, SystemClock
from reqbridge.application.ports.event_recorder_port import EventRecorderPort

SCHEMA = """
CREATE TABLE IF NOT EXISTS recorded_event (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  key TEXT NOT NULL,
  recorded_at TEXT NOT NULL,
  payload TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_recorded_event_key ON recorded_event (key, id);
CREATE TABLE IF NOT EXISTS recorder_policy (
  key TEXT PRIMARY KEY,
  retention_minutes INTEGER NOT NULL
);
"""


class SQLiteEventRecorder(EventRecorderPort):
    """SQLite-backed recorder. Persists recorded events across restarts.

    File path configurable; creates schema on first use.
    """

    def __init__(self, db_path: str = ".reqbridge_events.sqlite", clock: Clock | None = None) -> None:
        self._path = Path(db_path)
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def _cutoff(self, retention_minutes: int) -> str:
        return (self._clock.now() - timedelta(minutes=retention_minutes)).astimezone(UTC).isoformat()

    def record(self, key: str, value: Any, max_entries: int, retention_minutes: int) -> None:
        now_iso = self._clock.now().astimezone(UTC).isoformat()
        with self._lock:
            self._conn.execute(
                "INSERT INTO recorded_event (key, recorded_at, payload) VALUES (?, ?, ?)",
                (key, now_iso, json.dumps(value, default=str)),
            )
            self._conn.execute(
                "INSERT INTO recorder_policy (key, retention_minutes) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET retention_minutes=excluded.retention_minutes",
                (key, retention_minutes),
            )
            self._conn.execute(
                "DELETE FROM recorded_event WHERE key=? AND recorded_at < ?",
                (key, self._cutoff(retention_minutes)),
            )
            self._conn.execute(
                "DELETE FROM recorded_event WHERE key=? AND id NOT IN "
                "(SELECT id FROM recorded_event WHERE key=? ORDER BY id DESC LIMIT ?)",
                (key, key, max(max_entries, 0)),
            )
            self._conn.commit()

    def fetch(self, key: str) -> list[Any]:
        with self._lock:
            row = self._conn.execute(
                "SELECT retention_minutes FROM recorder_policy WHERE key=?", (key,)
            ).fetchone()
            if row is None:
                return []
            cur = self._conn.execute(
                "SELECT payload FROM recorded_event WHERE key=? AND recorded_at >= ? ORDER BY id",
                (key, self._cutoff(row[0])),
            )
            return [json.loads(payload) for (payload,) in cur.fetchall()]

    def close(self) -> None:
        self._conn.close()
