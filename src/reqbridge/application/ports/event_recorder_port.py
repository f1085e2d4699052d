from __future__ import annotations

from typing import Any, Protocol


class EventRecorderPort(Protocol):
    """Key-bounded event log consumed by live feeds."""

    def record(self, key: str, value: Any, max_entries: int, retention_minutes: int) -> None:
        """Append ``value`` under ``key``.

        Entries older than ``retention_minutes`` are pruned and only the newest
        ``max_entries`` are kept.
        """
        ...

    def fetch(self, key: str) -> list[Any]:
        """Recorded values for ``key``, oldest first."""
        ...
