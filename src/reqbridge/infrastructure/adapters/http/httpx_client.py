from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from reqbridge.application.ports.http_client_port import HttpTransportPort, RawExchange
from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

CLIENT_OPTIONS = frozenset({"verify", "cert", "proxy", "trust_env", "http2"})
REQUEST_OPTIONS = frozenset({"timeout", "follow_redirects", "params", "cookies", "extensions"})


def split_options(options: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Splits engine options into httpx.Client kwargs and request kwargs.

    A ``headers`` key is dropped: options never override header contents.
    """
    client_opts: dict[str, Any] = {}
    request_opts: dict[str, Any] = {}
    for key, value in options.items():
        if key == "headers":
            logger.warning("ignoring 'headers' engine option; pass headers explicitly")
        elif key in CLIENT_OPTIONS:
            client_opts[key] = value
        elif key in REQUEST_OPTIONS:
            request_opts[key] = value
        else:
            raise ConfigurationError(f"unsupported httpx option: {key!r}")
    return client_opts, request_opts


class HttpxTransport(HttpTransportPort):
    def __init__(self, timeout: float = 45.0, *, transport: httpx.BaseTransport | None = None) -> None:
        """HTTP transport backed by a short-lived httpx.Client per call.

        - Headers are sent as an ordered list, duplicates included
        - Redirects are not followed unless ``follow_redirects`` is passed

        Args:
            timeout (float, optional): Default timeout for requests. Defaults to 45.0.
            transport (httpx.BaseTransport | None, optional): Low-level transport
                override (e.g. ``httpx.MockTransport``). Defaults to None.
        """
        self._timeout = timeout
        self._transport = transport

    def _log(self, msg: str) -> None:
        logger.debug("[HttpxTransport] %s", msg)

    def send(self, request: OutboundRequest) -> RawExchange:
        """Sends the request and returns the raw exchange.

        Args:
            request (OutboundRequest): Request to send.

        Returns:
            RawExchange: Status, headers and body as received.
        """
        client_opts, request_opts = split_options(request.options)
        try:
            client = httpx.Client(timeout=self._timeout, transport=self._transport, **client_opts)
        except (ImportError, OSError, TypeError, ValueError) as e:
            raise TransportError(f"could not initialize httpx client: {e}") from e
        self._log(f"{request.method} {request.url} | options: {sorted(request.options)}")
        with client:
            try:
                resp = client.request(
                    request.method,
                    request.url,
                    headers=list(request.headers),
                    content=request.content,
                    **request_opts,
                )
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransportError(str(e) or type(e).__name__) from e
        self._log(f"{request.method} {request.url} -> {resp.status_code} len={len(resp.content)}")
        return RawExchange(
            status_code=resp.status_code,
            reason=resp.reason_phrase,
            headers=tuple(resp.headers.multi_items()),
            content=resp.content,
            url=str(resp.url),
        )
