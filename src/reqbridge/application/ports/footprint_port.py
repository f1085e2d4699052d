from __future__ import annotations

from typing import Any, Protocol


class FootprintProviderPort(Protocol):
    """Flat snapshot of client/request/network attributes for one request."""

    def collect(self, request: Any) -> dict[str, Any]: ...
