from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import requests

from reqbridge.application.ports.http_client_port import HttpTransportPort, RawExchange
from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.errors import ConfigurationError, TransportError
from reqbridge.domain.value_objects.headers import HeaderPairs

logger = logging.getLogger(__name__)

REQUEST_OPTIONS = frozenset({"timeout", "verify", "cert", "proxies", "allow_redirects", "params", "cookies"})


def fold_headers(headers: HeaderPairs) -> dict[str, str]:
    """requests cannot repeat a header name; repeated names are comma-joined."""
    folded: dict[str, str] = {}
    index: dict[str, str] = {}
    for name, value in headers:
        key = index.setdefault(name.lower(), name)
        folded[key] = f"{folded[key]}, {value}" if key in folded else value
    return folded


class RequestsTransport(HttpTransportPort):
    """HTTP transport backed by a fresh requests.Session per call.

    - Duplicate header names are folded into one comma-joined value
    - ``follow_redirects`` is accepted as an alias of ``allow_redirects``
    """

    def __init__(
        self,
        timeout: float = 45.0,
        *,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._timeout = timeout
        self._session_factory = session_factory

    def _log(self, msg: str) -> None:
        logger.debug("[RequestsTransport] %s", msg)

    def _request_options(self, options: Mapping[str, Any]) -> dict[str, Any]:
        opts: dict[str, Any] = {"timeout": self._timeout}
        for key, value in options.items():
            if key == "headers":
                logger.warning("ignoring 'headers' engine option; pass headers explicitly")
            elif key == "follow_redirects":
                opts["allow_redirects"] = value
            elif key in REQUEST_OPTIONS:
                opts[key] = value
            else:
                raise ConfigurationError(f"unsupported requests option: {key!r}")
        return opts

    def send(self, request: OutboundRequest) -> RawExchange:
        opts = self._request_options(request.options)
        headers = fold_headers(request.headers)
        try:
            session = self._session_factory()
        except Exception as e:
            raise TransportError(f"could not initialize requests session: {e}") from e
        self._log(f"{request.method} {request.url} | headers: {list(headers)}")
        with session:
            try:
                resp = session.request(
                    request.method,
                    request.url,
                    headers=headers,
                    data=request.content,
                    **opts,
                )
            except requests.RequestException as e:
                raise TransportError(str(e) or type(e).__name__) from e
        self._log(f"{request.method} {request.url} -> {resp.status_code} len={len(resp.content)}")
        return RawExchange(
            status_code=resp.status_code,
            reason=resp.reason or "",
            headers=tuple(resp.headers.items()),
            content=resp.content,
            url=resp.url,
        )
