from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from reqbridge.domain.value_objects.body import (
    JSON_CONTENT_TYPE,
    Body,
    StructuredBody,
    coerce_body,
)
from reqbridge.domain.value_objects.headers import (
    HeaderInput,
    HeaderPairs,
    coerce_headers,
    without_header,
)
from reqbridge.domain.value_objects.http_method import HttpMethod, normalize_method


@dataclass(frozen=True)
class OutboundRequest:
    method: str
    url: str
    headers: HeaderPairs = ()
    body: Body = field(default_factory=lambda: coerce_body(None))
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        method: str | HttpMethod,
        url: str,
        headers: HeaderInput = None,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> "OutboundRequest":
        """Single place where a structured body gets its content type.

        Any caller-supplied Content-Type is dropped for structured bodies so
        exactly one ``Content-Type: application/json`` is sent.
        """
        pairs = coerce_headers(headers)
        payload = coerce_body(body)
        if isinstance(payload, StructuredBody):
            pairs = without_header(pairs, "Content-Type") + (("Content-Type", JSON_CONTENT_TYPE),)
        return cls(
            method=normalize_method(method),
            url=url,
            headers=pairs,
            body=payload,
            options=dict(options or {}),
        )

    @property
    def content(self) -> bytes | None:
        return self.body.encode()
