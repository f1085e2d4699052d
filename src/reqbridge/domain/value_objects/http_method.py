from __future__ import annotations

from enum import Enum

from reqbridge.domain.errors import ConfigurationError


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


def normalize_method(method: str | HttpMethod) -> str:
    """Upper-cases a verb. Non-standard verbs are accepted as-is."""
    value = method.value if isinstance(method, HttpMethod) else str(method)
    value = value.strip().upper()
    if not value or any(ch.isspace() for ch in value):
        raise ConfigurationError(f"invalid HTTP method: {method!r}")
    return value
