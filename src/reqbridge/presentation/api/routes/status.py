from __future__ import annotations

import json

from fastapi import APIRouter, Depends
from starlette.responses import Response

from reqbridge.config import Settings
from reqbridge.infrastructure.web.response_builder import ResponseBuilder
from reqbridge.presentation.api.dependencies import get_settings

router = APIRouter(prefix="/v1/status", tags=["status"])


@router.get("/{code}")
def describe_status(  # type: ignore[misc]
    code: int,
    message: str | None = None,
    cfg: Settings = Depends(get_settings),
) -> Response:
    builder = ResponseBuilder()
    builder.set_cors_and_content_headers("GET", cfg.cors_origin, "application/json")
    resolved_code, reason = builder.resolve_message(code, message)
    payload = {
        "code": resolved_code,
        "message": reason,
        "status_line": builder.context.status_line,
        "wire_status": builder.context.registry.wire_status(resolved_code),
    }
    return builder.context.render(json.dumps(payload))
