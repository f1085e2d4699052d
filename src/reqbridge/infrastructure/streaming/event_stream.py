"""Event-stream push loop bound to a single connection.

States: ACTIVE -> CLOSED (terminal). Each iteration checks for disconnection
or cancellation, calls the producer once, writes one ``data: <json>\\n\\n``
frame, then sleeps for the cadence. There is no cap on duration or events.
"""
from __future__ import annotations

import asyncio
import inspect
import json
import logging
import math
import threading
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import Enum
from typing import Any, Protocol

from starlette.concurrency import run_in_threadpool
from starlette.responses import StreamingResponse

from reqbridge.domain.errors import ConfigurationError, PeerDisconnected
from reqbridge.infrastructure.metrics import STREAM_EVENTS, STREAM_SESSIONS
from reqbridge.infrastructure.web.response_builder import ResponseContext

logger = logging.getLogger(__name__)

MIN_CADENCE = 1
MAX_CADENCE = 300
DEFAULT_SUBTYPE = "text"

Producer = Callable[[], Any]


class StreamState(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class FrameWriter(Protocol):
    def write(self, data: str) -> Any: ...
    def flush(self) -> Any: ...


class CancellationToken:
    """Cooperative stop signal, checked at the top of each iteration."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def validate_cadence(cadence: int) -> int:
    if isinstance(cadence, bool) or not isinstance(cadence, int):
        raise ConfigurationError(f"cadence must be a whole number of seconds, got {cadence!r}")
    if not MIN_CADENCE <= cadence <= MAX_CADENCE:
        raise ConfigurationError(
            f"cadence must be between {MIN_CADENCE} and {MAX_CADENCE} seconds, got {cadence}"
        )
    return cadence


def validate_subtype(subtype: str) -> str:
    if not subtype or "/" in subtype or any(ch.isspace() for ch in subtype):
        raise ConfigurationError(f"invalid event-stream subtype: {subtype!r}")
    return subtype


def _finite(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def encode_frame(value: Any) -> str:
    """One event frame. NaN and infinities are sent as null."""
    try:
        text = json.dumps(value, separators=(",", ":"), default=str, allow_nan=False)
    except ValueError:
        text = json.dumps(_finite(value), separators=(",", ":"), default=str, allow_nan=False)
    return f"data: {text}\n\n"


class StreamSession:
    """One push feed over one connection.

    Invalid cadence or subtype raises ConfigurationError here, before any
    output exists.
    """

    def __init__(
        self,
        producer: Producer,
        *,
        cadence: int = MIN_CADENCE,
        subtype: str = DEFAULT_SUBTYPE,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.producer = producer
        self.cadence = validate_cadence(cadence)
        self.subtype = validate_subtype(subtype)
        self._sleep = sleep
        self._async_sleep = async_sleep
        self.state = StreamState.ACTIVE
        self.ticks = 0

    @property
    def media_type(self) -> str:
        return f"{self.subtype}/event-stream"

    def prepare(self, context: ResponseContext) -> ResponseContext:
        context.set_header("Content-Type", self.media_type)
        context.set_header("Cache-Control", "no-cache")
        context.set_header("Connection", "keep-alive")
        context.set_header("X-Accel-Buffering", "no")
        return context

    def _stop_requested(self, disconnected: bool, token: CancellationToken | None) -> bool:
        if token is not None and token.cancelled:
            logger.info("stream cancelled after %d events", self.ticks)
            return True
        if disconnected:
            logger.info("peer disconnected after %d events", self.ticks)
            return True
        return False

    def _close(self) -> None:
        if self.state is StreamState.ACTIVE:
            self.state = StreamState.CLOSED

    def _frame(self, value: Any) -> str:
        self.ticks += 1
        STREAM_EVENTS.inc()
        return encode_frame(value)

    def run(
        self,
        writer: FrameWriter,
        is_disconnected: Callable[[], bool] = lambda: False,
        token: CancellationToken | None = None,
        context: ResponseContext | None = None,
    ) -> int:
        """Blocking loop. Returns the number of events written."""
        if self.state is StreamState.CLOSED:
            raise PeerDisconnected("stream session already closed")
        ctx = context or ResponseContext()
        STREAM_SESSIONS.inc()
        try:
            with ctx.streaming():
                while not self._stop_requested(is_disconnected(), token):
                    writer.write(self._frame(self.producer()))
                    writer.flush()
                    self._sleep(self.cadence)
        finally:
            self._close()
            STREAM_SESSIONS.dec()
        return self.ticks

    async def frames(
        self,
        is_disconnected: Callable[[], Awaitable[bool]],
        token: CancellationToken | None = None,
    ) -> AsyncIterator[str]:
        """Async variant for ASGI servers; sync producers run in the threadpool."""
        if self.state is StreamState.CLOSED:
            raise PeerDisconnected("stream session already closed")
        STREAM_SESSIONS.inc()
        try:
            while not self._stop_requested(await is_disconnected(), token):
                if inspect.iscoroutinefunction(self.producer):
                    value = await self.producer()
                else:
                    value = await run_in_threadpool(self.producer)
                yield self._frame(value)
                await self._async_sleep(self.cadence)
        finally:
            self._close()
            STREAM_SESSIONS.dec()

    def respond(
        self,
        context: ResponseContext,
        is_disconnected: Callable[[], Awaitable[bool]],
        token: CancellationToken | None = None,
    ) -> StreamingResponse:
        self.prepare(context)

        async def body() -> AsyncIterator[str]:
            with context.streaming():
                async for frame in self.frames(is_disconnected, token):
                    yield frame

        return context.render_stream(body())
