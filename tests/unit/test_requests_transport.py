import requests

from reqbridge.application.use_cases.execute_request import RequestExecutor
from reqbridge.domain.entities.outbound_response import ExecutionError
from reqbridge.infrastructure.adapters.http.factory import build_transport
from reqbridge.infrastructure.adapters.http.httpx_client import HttpxTransport
from reqbridge.infrastructure.adapters.http.requests_client import RequestsTransport, fold_headers
from tests.unit._fakes_http import FakeRequestsAdapter, session_with


def test_duplicate_headers_are_comma_joined():
    assert fold_headers((("X-A", "1"), ("x-a", "2"), ("X-B", "3"))) == {"X-A": "1, 2", "X-B": "3"}


def test_requests_transport_round_trip():
    adapter = FakeRequestsAdapter(headers={"Content-Type": "application/json"}, body=b'{"a":1}')
    executor = RequestExecutor(RequestsTransport(timeout=3, session_factory=session_with(adapter)))
    res = executor.execute("patch", "https://api.test/r", {"X-Trace": "t1"}, {"n": 2}, {"verify": False})
    prepared, kwargs = adapter.sent[0]
    assert prepared.method == "PATCH"
    assert prepared.headers["Content-Type"] == "application/json"
    assert prepared.headers["X-Trace"] == "t1"
    assert prepared.body == b'{"n":2}'
    assert kwargs["timeout"] == 3
    assert kwargs["verify"] is False
    assert res.body == {"a": 1}


def test_requests_transport_failure():
    adapter = FakeRequestsAdapter(error=requests.ConnectionError("refused"))
    executor = RequestExecutor(RequestsTransport(session_factory=session_with(adapter)))
    res = executor.execute("GET", "https://api.test/r")
    assert isinstance(res, ExecutionError)
    assert res.kind == "transport"
    assert "refused" in res.message


def test_engine_factory():
    assert isinstance(build_transport("httpx", 1.0), HttpxTransport)
    assert isinstance(build_transport(" Requests ", 1.0), RequestsTransport)
