from __future__ import annotations

from typing import Any

from starlette.requests import Request

from reqbridge.application.ports.clock_port import Clock, SystemClock
from reqbridge.application.ports.footprint_port import FootprintProviderPort


class RequestFootprintProvider(FootprintProviderPort):
    """Footprint built from what the inbound request itself carries."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def collect(self, request: Request) -> dict[str, Any]:
        forwarded = request.headers.get("x-forwarded-for", "")
        if forwarded:
            ip = forwarded.split(",")[0].strip()
        else:
            ip = request.client.host if request.client else ""
        return {
            "ip": ip,
            "forwarded_for": forwarded,
            "method": request.method,
            "path": request.url.path,
            "query": request.url.query,
            "user_agent": request.headers.get("user-agent", ""),
            "language": request.headers.get("accept-language", ""),
            "referer": request.headers.get("referer", ""),
            "seen_at": self._clock.now().isoformat(),
        }
