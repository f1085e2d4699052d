from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from reqbridge.domain.errors import ConfigurationError

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class EmptyBody:
    def encode(self) -> bytes | None:
        return None


@dataclass(frozen=True)
class RawBody:
    payload: str | bytes

    def encode(self) -> bytes:
        if isinstance(self.payload, bytes):
            return self.payload
        return self.payload.encode("utf-8")


@dataclass(frozen=True)
class StructuredBody:
    """A mapping (or list) sent as a JSON document.

    The JSON text is produced once, at construction, and reused by every
    consumer (the executor and the code emitter alike).
    """

    data: Any
    serialized: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        try:
            text = json.dumps(self.data, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"body is not JSON serializable: {e}") from e
        object.__setattr__(self, "serialized", text)

    def encode(self) -> bytes:
        return self.serialized.encode("utf-8")


Body = Union[EmptyBody, RawBody, StructuredBody]


def coerce_body(value: Any) -> Body:
    if value is None:
        return EmptyBody()
    if isinstance(value, (EmptyBody, RawBody, StructuredBody)):
        return value
    if isinstance(value, (str, bytes)):
        return RawBody(value)
    if isinstance(value, bytearray):
        return RawBody(bytes(value))
    if isinstance(value, (Mapping, list, tuple)):
        return StructuredBody(value)
    raise ConfigurationError(f"unsupported body type: {type(value).__name__}")
