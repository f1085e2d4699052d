from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.value_objects.headers import HeaderPairs


@dataclass(frozen=True)
class RawExchange:
    """What came back over the wire, before any decoding."""

    status_code: int
    reason: str
    headers: HeaderPairs
    content: bytes
    url: str


class HttpTransportPort(Protocol):
    """One synchronous round trip per call. No retries, no pooling."""

    def send(self, request: OutboundRequest) -> RawExchange:
        """Performs the exchange.

        Raises TransportError when the client cannot be set up or the network
        exchange fails; ConfigurationError for unusable engine options.
        """
        ...
