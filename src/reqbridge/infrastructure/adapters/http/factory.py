from __future__ import annotations

from reqbridge.application.ports.http_client_port import HttpTransportPort
from reqbridge.domain.errors import ConfigurationError
from reqbridge.infrastructure.adapters.http.httpx_client import HttpxTransport
from reqbridge.infrastructure.adapters.http.requests_client import RequestsTransport


def build_transport(engine: str, timeout: float) -> HttpTransportPort:
    name = engine.strip().lower()
    if name == "httpx":
        return HttpxTransport(timeout=timeout)
    if name == "requests":
        return RequestsTransport(timeout=timeout)
    raise ConfigurationError(f"unknown HTTP engine: {engine!r} (expected 'httpx' or 'requests')")
