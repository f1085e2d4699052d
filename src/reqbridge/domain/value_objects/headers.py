from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Union

from reqbridge.domain.errors import ConfigurationError

HeaderPairs = tuple[tuple[str, str], ...]
HeaderInput = Union[Mapping[str, str], Iterable[tuple[str, str]], Iterable[str], None]


def coerce_headers(headers: HeaderInput) -> HeaderPairs:
    """Normalizes headers into ordered (name, value) pairs.

    Accepts a mapping, a sequence of pairs, or raw ``"Name: value"`` lines.
    Order is kept and duplicate names are preserved.
    """
    if not headers:
        return ()
    if isinstance(headers, Mapping):
        return tuple((str(k), str(v)) for k, v in headers.items())
    pairs: list[tuple[str, str]] = []
    for item in headers:
        if isinstance(item, str):
            name, sep, value = item.partition(":")
            if not sep or not name.strip():
                raise ConfigurationError(f"malformed header line: {item!r}")
            pairs.append((name.strip(), value.strip()))
        else:
            name, value = item
            pairs.append((str(name), str(value)))
    return tuple(pairs)


def header_value(headers: HeaderPairs, name: str) -> str | None:
    """First value for ``name`` (case-insensitive), or None."""
    wanted = name.lower()
    return next((v for k, v in headers if k.lower() == wanted), None)


def without_header(headers: HeaderPairs, name: str) -> HeaderPairs:
    wanted = name.lower()
    return tuple((k, v) for k, v in headers if k.lower() != wanted)


def joined_header(headers: HeaderPairs, name: str) -> str | None:
    """All values for ``name`` joined with ", ", as XHR's getResponseHeader does."""
    wanted = name.lower()
    values = [v for k, v in headers if k.lower() == wanted]
    return ", ".join(values) if values else None
