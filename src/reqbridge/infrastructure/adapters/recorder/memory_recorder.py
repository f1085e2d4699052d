from __future__ import annotations

import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Any

from reqbridge.application.ports.clock_port import Clock, SystemClock
from reqbridge.application.ports.event_recorder_port import EventRecorderPort


class InMemoryEventRecorder(EventRecorderPort):
    """Simple in-memory recorder for development. Not persistent."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, deque[tuple[datetime, Any]]] = {}
        self._retention: dict[str, timedelta] = {}
        self._lock = threading.Lock()

    def _prune(self, key: str, now: datetime) -> None:
        entries = self._entries.get(key)
        retention = self._retention.get(key)
        if not entries or retention is None:
            return
        cutoff = now - retention
        while entries and entries[0][0] < cutoff:
            entries.popleft()

    def record(self, key: str, value: Any, max_entries: int, retention_minutes: int) -> None:
        now = self._clock.now()
        with self._lock:
            entries = self._entries.setdefault(key, deque())
            self._retention[key] = timedelta(minutes=retention_minutes)
            entries.append((now, value))
            self._prune(key, now)
            while len(entries) > max(max_entries, 0):
                entries.popleft()

    def fetch(self, key: str) -> list[Any]:
        with self._lock:
            self._prune(key, self._clock.now())
            return [value for _, value in self._entries.get(key, ())]
