"""Explicit per-response state for status line, headers and output buffering.

Handlers build a ``ResponseContext`` through ``ResponseBuilder`` and render it
into a Starlette response once the body is known.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from urllib.parse import quote

from starlette.responses import Response, StreamingResponse

from reqbridge.domain.status_registry import StatusRegistry, default_registry

logger = logging.getLogger(__name__)

STATUS_CODE_HEADER = "X-Status-Code"
STATUS_REASON_HEADER = "X-Status-Reason"


@dataclass
class ResponseContext:
    status_code: int = 200
    reason: str = "OK"
    protocol: str = "HTTP/1.1"
    headers: list[tuple[str, str]] = field(default_factory=list)
    buffering: bool = True
    registry: StatusRegistry = field(default=default_registry, repr=False)

    @property
    def status_line(self) -> str:
        return f"{self.protocol} {self.status_code} {self.reason}"

    def set_header(self, name: str, value: str) -> None:
        """Replaces any previous value of ``name`` (last write wins)."""
        wanted = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != wanted]
        self.headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        wanted = name.lower()
        return next((v for k, v in reversed(self.headers) if k.lower() == wanted), None)

    @contextmanager
    def streaming(self) -> Iterator["ResponseContext"]:
        """Output buffering off for the duration of the block, restored after."""
        previous = self.buffering
        self.buffering = False
        try:
            yield self
        finally:
            self.buffering = previous

    def _wire(self) -> tuple[int, dict[str, str]]:
        headers = dict(self.headers)
        headers[STATUS_REASON_HEADER] = self.reason
        wire = self.registry.wire_status(self.status_code)
        if wire != self.status_code:
            headers[STATUS_CODE_HEADER] = str(self.status_code)
        return wire, headers

    def render(self, content: str | bytes = b"") -> Response:
        status, headers = self._wire()
        return Response(content=content, status_code=status, headers=headers)

    def render_stream(self, frames: AsyncIterable[str] | Iterable[str]) -> StreamingResponse:
        status, headers = self._wire()
        return StreamingResponse(frames, status_code=status, headers=headers)


class ResponseBuilder:
    def __init__(self, context: ResponseContext | None = None) -> None:
        self.context = context or ResponseContext()

    def resolve_message(self, code: int, message: str | None = None) -> tuple[int, str]:
        """Sets the status code and status line from the registry.

        Without a message the 200 phrase is used whatever ``code`` is. With a
        message the code's own phrase is used and the text itself is not.
        Callers rely on both behaviors.
        """
        registry = self.context.registry
        if not message:
            registry.phrase(code)
            reason = registry.phrase(200)
        else:
            reason = registry.phrase(code)
        self.context.status_code = code
        self.context.reason = reason
        logger.debug("status line: %s", self.context.status_line)
        return code, reason

    def set_cors_and_content_headers(
        self,
        method: str = "GET",
        origin: str = "*",
        content_type: str = "application/json",
        extra_headers: Mapping[str, str] | None = None,
    ) -> ResponseContext:
        ctx = self.context
        ctx.set_header("Content-Type", content_type)
        ctx.set_header("Access-Control-Allow-Methods", method)
        ctx.set_header("Access-Control-Allow-Origin", origin)
        ctx.set_header("Access-Control-Allow-Headers", "*")
        for name, value in (extra_headers or {}).items():
            ctx.set_header(name, value)
        return ctx

    def set_download_headers(self, filename: str, length: int) -> ResponseContext:
        """Headers for a browser download of ``length`` bytes.

        The declared length is trusted as given.
        """
        ctx = self.context
        ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("\\", "_").replace('"', "_")
        disposition = f'attachment; filename="{ascii_name}"'
        if ascii_name != filename:
            disposition += f"; filename*=UTF-8''{quote(filename)}"
        ctx.set_header("Content-Description", "File Transfer")
        ctx.set_header("Content-Type", "application/octet-stream")
        ctx.set_header("Content-Disposition", disposition)
        ctx.set_header("Content-Transfer-Encoding", "binary")
        ctx.set_header("Expires", "0")
        ctx.set_header("Cache-Control", "no-cache, no-store, must-revalidate")
        ctx.set_header("Pragma", "no-cache")
        ctx.set_header("Content-Length", str(length))
        return ctx
