import pytest

from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.errors import ConfigurationError
from reqbridge.domain.value_objects.body import EmptyBody, RawBody, StructuredBody, coerce_body
from reqbridge.domain.value_objects.headers import coerce_headers
from reqbridge.domain.value_objects.http_method import HttpMethod, normalize_method


def _content_types(req):
    return [v for k, v in req.headers if k.lower() == "content-type"]


def test_method_is_upper_cased_and_custom_verbs_pass():
    assert normalize_method("get") == "GET"
    assert normalize_method(HttpMethod.PATCH) == "PATCH"
    assert normalize_method("purge") == "PURGE"


@pytest.mark.parametrize("bad", ["", "   ", "GE T"])
def test_blank_or_spaced_method_is_rejected(bad):
    with pytest.raises(ConfigurationError):
        normalize_method(bad)


def test_structured_body_gets_exactly_one_json_content_type():
    req = OutboundRequest.build("post", "https://api.test", [("Content-Type", "text/plain"), ("content-type", "x/y")], {"a": 1})
    assert _content_types(req) == ["application/json"]
    assert req.content == b'{"a":1}'


def test_raw_body_is_sent_unchanged_without_content_type():
    req = OutboundRequest.build("PUT", "https://api.test", None, "a=1&b=2")
    assert _content_types(req) == []
    assert req.content == b"a=1&b=2"


def test_absent_body_sends_nothing():
    req = OutboundRequest.build("GET", "https://api.test")
    assert isinstance(req.body, EmptyBody)
    assert req.content is None


def test_body_dispatch():
    assert isinstance(coerce_body(b"\x00\x01"), RawBody)
    assert isinstance(coerce_body([1, 2]), StructuredBody)
    with pytest.raises(ConfigurationError):
        coerce_body(object())


def test_unserializable_structured_body_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        StructuredBody({"when": object()})


def test_headers_keep_order_and_duplicates():
    pairs = coerce_headers(["X-A: 1", "X-B: 2", "X-A: 3"])
    assert pairs == (("X-A", "1"), ("X-B", "2"), ("X-A", "3"))
    assert coerce_headers({"Accept": "text/html"}) == (("Accept", "text/html"),)
    with pytest.raises(ConfigurationError):
        coerce_headers(["no-colon-here"])
