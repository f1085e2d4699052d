from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from reqbridge.application.ports.event_recorder_port import EventRecorderPort
from reqbridge.application.ports.footprint_port import FootprintProviderPort
from reqbridge.config import Settings
from reqbridge.infrastructure.streaming.event_stream import StreamSession
from reqbridge.infrastructure.web.response_builder import ResponseBuilder
from reqbridge.presentation.api.dependencies import (
    get_footprint_provider,
    get_recorder,
    get_settings,
)

router = APIRouter(prefix="/v1/traffic", tags=["traffic"])

TRAFFIC_KEY = "traffic"


@router.get("/stream")
async def traffic_stream(  # type: ignore[misc]
    request: Request,
    cadence: int | None = None,
    recorder: EventRecorderPort = Depends(get_recorder),
    footprints: FootprintProviderPort = Depends(get_footprint_provider),
    cfg: Settings = Depends(get_settings),
) -> Response:
    # validate before recording so a rejected stream leaves no trace
    session = StreamSession(
        lambda: recorder.fetch(TRAFFIC_KEY),
        cadence=cfg.stream_cadence if cadence is None else cadence,
        subtype=cfg.stream_subtype,
    )
    recorder.record(
        TRAFFIC_KEY,
        footprints.collect(request),
        cfg.recorder_max_entries,
        cfg.recorder_retention_minutes,
    )
    builder = ResponseBuilder()
    builder.set_cors_and_content_headers("GET", cfg.cors_origin, session.media_type)
    builder.resolve_message(200)
    return session.respond(builder.context, request.is_disconnected)
