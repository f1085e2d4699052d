from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from typing import Any, Literal

from reqbridge.domain.value_objects.headers import HeaderPairs, header_value, joined_header

# Substring match, case-sensitive, identical in generated client code.
JSON_MARKER = "application/json"

# Characters String.prototype.trim removes (WhiteSpace + LineTerminator).
JS_WHITESPACE = (
    "\t\n\x0b\x0c\r \xa0\ufeff\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"
)

_UNSET: Any = object()


def is_json_content_type(content_type: str | None) -> bool:
    return content_type is not None and JSON_MARKER in content_type


def charset_of(content_type: str | None, default: str = "utf-8") -> str:
    if not content_type:
        return default
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return default


class HttpResponse:
    """Normalized result of one outbound exchange.

    ``text`` is the raw body, ``body`` the decoded one: parsed JSON when the
    content type contains ``application/json``, otherwise ``text`` itself.
    """

    def __init__(
        self,
        status_code: int,
        reason: str,
        headers: HeaderPairs,
        content: bytes,
        url: str,
        *,
        body: Any = _UNSET,
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.header_pairs = tuple(headers)
        self.content = content
        self.url = url
        text = content.decode(self._encoding(), errors="replace")
        # browsers drop a leading byte order mark before exposing the text
        self.text = text[1:] if text.startswith("\ufeff") else text
        self.body = self.text if body is _UNSET else body

    def _encoding(self) -> str:
        name = charset_of(self.content_type)
        try:
            codecs.lookup(name)
        except LookupError:
            return "utf-8"
        return name

    @property
    def headers(self) -> dict[str, str]:
        merged: dict[str, str] = {}
        for name, value in self.header_pairs:
            key = name.lower()
            merged[key] = f"{merged[key]}, {value}" if key in merged else value
        return merged

    def header(self, name: str) -> str | None:
        return header_value(self.header_pairs, name)

    @property
    def content_type(self) -> str | None:
        return joined_header(self.header_pairs, "Content-Type")

    @property
    def status_line(self) -> str:
        return f"{self.status_code} {self.reason}".rstrip()

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return json.loads(self.text)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status_code,
            "status_line": self.status_line,
            "url": self.url,
            "headers": [list(pair) for pair in self.header_pairs],
            "raw": self.text,
            "body": self.body,
        }

    def __repr__(self) -> str:
        return f"<HttpResponse [{self.status_line}] {self.url}>"


@dataclass(frozen=True)
class ExecutionError:
    """Returned instead of a response when a call could not be completed.

    kind == "transport": the exchange never happened (DNS, refused, timeout...).
    kind == "decode": a JSON-typed response did not parse; ``response`` holds it
    with the raw text as body.
    """

    kind: Literal["transport", "decode"]
    message: str
    response: HttpResponse | None = None

    def __str__(self) -> str:
        return self.message
