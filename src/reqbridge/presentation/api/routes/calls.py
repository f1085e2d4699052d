from __future__ import annotations

import json

from fastapi import APIRouter, Depends
from starlette.responses import Response

from reqbridge.application.use_cases.emit_client_code import CodeEmitter
from reqbridge.application.use_cases.execute_request import RequestExecutor
from reqbridge.config import Settings
from reqbridge.domain.entities.outbound_response import ExecutionError
from reqbridge.infrastructure.metrics import EMITTED_ROUTINES, EXECUTIONS
from reqbridge.infrastructure.web.response_builder import ResponseBuilder
from reqbridge.presentation.api.dependencies import get_emitter, get_executor, get_settings
from reqbridge.presentation.api.schemas import OutboundCall

router = APIRouter(prefix="/v1/requests", tags=["requests"])


@router.post("/execute")
def execute_request(  # type: ignore[misc]
    call: OutboundCall,
    executor: RequestExecutor = Depends(get_executor),
    cfg: Settings = Depends(get_settings),
) -> Response:
    result = executor.execute(call.method, call.url, call.headers, call.body, call.options)
    builder = ResponseBuilder()
    if isinstance(result, ExecutionError):
        EXECUTIONS.labels(outcome=result.kind).inc()
        builder.set_cors_and_content_headers("POST", cfg.cors_origin, "text/plain; charset=utf-8")
        builder.resolve_message(502, result.message)
        return builder.context.render(result.message)
    EXECUTIONS.labels(outcome="ok").inc()
    builder.set_cors_and_content_headers("POST", cfg.cors_origin, "application/json")
    builder.resolve_message(200)
    return builder.context.render(json.dumps(result.to_dict()))


@router.post("/emit")
def emit_request(  # type: ignore[misc]
    call: OutboundCall,
    emitter: CodeEmitter = Depends(get_emitter),
    cfg: Settings = Depends(get_settings),
) -> Response:
    code = emitter.emit(call.method, call.url, call.headers, call.body, call.options)
    EMITTED_ROUTINES.inc()
    builder = ResponseBuilder()
    builder.set_cors_and_content_headers("POST", cfg.cors_origin, "application/javascript; charset=utf-8")
    builder.resolve_message(200)
    return builder.context.render(code)
