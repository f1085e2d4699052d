from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from reqbridge.config import Settings
from reqbridge.infrastructure.streaming.event_stream import StreamSession
from reqbridge.infrastructure.web.response_builder import ResponseBuilder
from reqbridge.presentation.api.dependencies import get_settings

router = APIRouter(prefix="/v1/stream", tags=["stream"])


def server_clock() -> dict[str, Any]:
    now = datetime.now(UTC)
    return {"time": now.isoformat(), "epoch": int(now.timestamp())}


@router.get("/clock")
async def clock_stream(  # type: ignore[misc]
    request: Request,
    cadence: int | None = None,
    subtype: str | None = None,
    cfg: Settings = Depends(get_settings),
) -> Response:
    session = StreamSession(
        server_clock,
        cadence=cfg.stream_cadence if cadence is None else cadence,
        subtype=subtype or cfg.stream_subtype,
    )
    builder = ResponseBuilder()
    builder.set_cors_and_content_headers("GET", cfg.cors_origin, session.media_type)
    builder.resolve_message(200)
    return session.respond(builder.context, request.is_disconnected)
