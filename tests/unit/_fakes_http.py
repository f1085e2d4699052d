from __future__ import annotations

from datetime import datetime, timedelta, timezone

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from reqbridge.application.ports.http_client_port import RawExchange
from reqbridge.domain.errors import TransportError


class FakeTransport:
    def __init__(self, exchange: RawExchange | None = None, error: Exception | None = None) -> None:
        self.exchange = exchange
        self.error = error
        self.sent = []
    def send(self, request):
        self.sent.append(request)
        if self.error:
            raise self.error
        return self.exchange


def exchange(status=200, headers=(), content=b"", reason="OK", url="https://api.test/x"):
    return RawExchange(status, reason, tuple(headers), content, url)


def refused():
    return FakeTransport(error=TransportError("connection refused"))


class FakeRequestsAdapter(BaseAdapter):
    def __init__(self, status=200, headers=None, body=b"", error=None) -> None:
        super().__init__()
        self.status, self.headers, self.body, self.error = status, headers or {}, body, error
        self.sent = []
    def send(self, request, **kwargs):
        self.sent.append((request, kwargs))
        if self.error:
            raise self.error
        resp = requests.Response()
        resp.status_code = self.status
        resp.reason = "OK" if self.status == 200 else "Teapot"
        resp.headers = CaseInsensitiveDict(self.headers)
        resp._content = self.body
        resp.url = request.url
        resp.request = request
        return resp
    def close(self):
        pass


def session_with(adapter):
    def factory():
        s = requests.Session()
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s
    return factory


class FixedClock:
    def __init__(self, now=None) -> None:
        self.current = now or datetime(2025, 1, 1, tzinfo=timezone.utc)
    def now(self):
        return self.current
    def advance(self, minutes):
        self.current = self.current + timedelta(minutes=minutes)


class FakeWriter:
    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.flushes = 0
    def write(self, data):
        self.chunks.append(data)
    def flush(self):
        self.flushes += 1


def disconnect_after(checks):
    """is_disconnected callable: False for ``checks`` calls, then True."""
    state = {"n": 0}
    def probe():
        state["n"] += 1
        return state["n"] > checks
    return probe
