from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from reqbridge.application.ports.http_client_port import HttpTransportPort, RawExchange
from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.entities.outbound_response import (
    ExecutionError,
    HttpResponse,
    JS_WHITESPACE,
    is_json_content_type,
)
from reqbridge.domain.errors import DecodeAmbiguityError, TransportError
from reqbridge.domain.value_objects.headers import HeaderInput
from reqbridge.domain.value_objects.http_method import HttpMethod

logger = logging.getLogger(__name__)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def decode_exchange(exchange: RawExchange) -> HttpResponse:
    """Builds the normalized response, parsing JSON-typed bodies.

    A whitespace-only JSON body decodes to None. NaN and Infinity are rejected
    as they are by JSON.parse. Raises DecodeAmbiguityError
    (carrying the undecoded response) when a JSON-typed body does not parse.
    """
    response = HttpResponse(
        exchange.status_code,
        exchange.reason,
        exchange.headers,
        exchange.content,
        exchange.url,
    )
    content_type = response.content_type
    if not is_json_content_type(content_type):
        return response
    if not response.text.strip(JS_WHITESPACE):
        response.body = None
        return response
    try:
        response.body = json.loads(response.text, parse_constant=_reject_constant)
    except ValueError as e:
        raise DecodeAmbiguityError(
            f"response declared {content_type!r} but body is not valid JSON: {e}",
            response=response,
        ) from e
    return response


class RequestExecutor:
    """Performs one outbound call and normalizes its response.

    Failures come back as ``ExecutionError`` values; a non-2xx status is still a
    normal ``HttpResponse``.
    """

    def __init__(self, transport: HttpTransportPort) -> None:
        self.transport = transport

    def execute(
        self,
        method: str | HttpMethod,
        url: str,
        headers: HeaderInput = None,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> HttpResponse | ExecutionError:
        request = OutboundRequest.build(method, url, headers, body, options)
        return self.send(request)

    def send(self, request: OutboundRequest) -> HttpResponse | ExecutionError:
        logger.debug("%s %s (%d headers)", request.method, request.url, len(request.headers))
        try:
            exchange = self.transport.send(request)
        except TransportError as e:
            logger.warning("%s %s failed: %s", request.method, request.url, e)
            return ExecutionError("transport", str(e))
        try:
            response = decode_exchange(exchange)
        except DecodeAmbiguityError as e:
            logger.warning("%s %s: %s", request.method, request.url, e)
            partial = e.response if isinstance(e.response, HttpResponse) else None
            return ExecutionError("decode", str(e), response=partial)
        logger.debug("%s %s -> %s", request.method, request.url, response.status_line)
        return response
