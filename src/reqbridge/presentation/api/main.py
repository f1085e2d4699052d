from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from reqbridge.config import settings
from reqbridge.domain.errors import ConfigurationError
from reqbridge.infrastructure.metrics import registry
from reqbridge.infrastructure.web.response_builder import ResponseBuilder
from reqbridge.presentation.api.routes.calls import router as calls_router
from reqbridge.presentation.api.routes.health import router as health_router
from reqbridge.presentation.api.routes.status import router as status_router
from reqbridge.presentation.api.routes.stream import router as stream_router
from reqbridge.presentation.api.routes.traffic import router as traffic_router

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="reqbridge", version="0.1.0")
app.include_router(health_router)
app.include_router(calls_router)
app.include_router(status_router)
app.include_router(stream_router)
app.include_router(traffic_router)


@app.exception_handler(ConfigurationError)
async def configuration_error(request: Request, exc: ConfigurationError) -> Response:
    logger.error("%s %s rejected: %s", request.method, request.url.path, exc)
    builder = ResponseBuilder()
    builder.set_cors_and_content_headers(request.method, settings.cors_origin, "text/plain; charset=utf-8")
    builder.resolve_message(422, str(exc))
    return builder.context.render(str(exc))


@app.get("/metrics")
def metrics() -> Response:  # type: ignore[misc]
    data = generate_latest(registry)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
