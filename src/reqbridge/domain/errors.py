from __future__ import annotations


class ReqbridgeError(Exception):
    """Base class for every error raised by reqbridge."""


class ConfigurationError(ReqbridgeError, ValueError):
    """Invalid caller-supplied configuration, detected before any I/O."""


class UnknownStatusCode(ConfigurationError):
    def __init__(self, code: int) -> None:
        super().__init__(f"status code {code} is outside the supported range")
        self.code = code


class TransportError(ReqbridgeError):
    """The HTTP client could not be initialized or the exchange failed."""


class DecodeAmbiguityError(ReqbridgeError):
    """A response declared as JSON whose body does not parse."""

    def __init__(self, message: str, response: object | None = None) -> None:
        super().__init__(message)
        self.response = response


class PeerDisconnected(ReqbridgeError):
    """The stream peer went away. Normal end of a stream session."""
