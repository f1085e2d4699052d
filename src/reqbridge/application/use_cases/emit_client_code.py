"""Browser-side twin of RequestExecutor.

The generated routine builds its request from the same ``OutboundRequest``
the executor would send (same method, same header list, same serialized body)
and decodes the response with the same content-type rule.
"""
from __future__ import annotations

import base64
import json
import logging
import re
from collections.abc import Mapping
from string import Template
from typing import Any

from reqbridge.domain.entities.outbound_request import OutboundRequest
from reqbridge.domain.entities.outbound_response import JSON_MARKER
from reqbridge.domain.errors import ConfigurationError
from reqbridge.domain.value_objects.body import RawBody, StructuredBody
from reqbridge.domain.value_objects.headers import HeaderInput
from reqbridge.domain.value_objects.http_method import HttpMethod

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_NAME = "reqbridgeRequest"

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# json.dumps already escapes U+2028/U+2029 (ensure_ascii); these close a
# <script> element or open an HTML comment.
_SCRIPT_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}

_ROUTINE = Template("""\
async function $name() {
  return new Promise(function (resolve, reject) {
    var xhr = new XMLHttpRequest();
    xhr.open($method, $url, true);
    var headers = $headers;
    for (var i = 0; i < headers.length; i++) {
      xhr.setRequestHeader(headers[i][0], headers[i][1]);
    }
$options    xhr.onload = function () {
      var contentType = xhr.getResponseHeader("Content-Type") || "";
      var raw = xhr.responseText;
      var body = raw;
      if (contentType.indexOf($marker) !== -1) {
        if (raw.trim() === "") {
          body = null;
        } else {
          try {
            body = JSON.parse(raw);
          } catch (err) {
            reject({kind: "decode", message: String(err && err.message ? err.message : err), status: xhr.status, statusText: xhr.statusText, raw: raw});
            return;
          }
        }
      }
      resolve({status: xhr.status, statusText: xhr.statusText, headers: xhr.getAllResponseHeaders(), raw: raw, body: body});
    };
    xhr.onerror = function () {
      reject({kind: "transport", message: xhr.statusText || "Network request failed", status: xhr.status});
    };
    xhr.ontimeout = function () {
      reject({kind: "transport", message: xhr.statusText || "Request timed out", status: xhr.status});
    };
    xhr.send($body);
  });
}
""")


def script_literal(value: Any) -> str:
    """JSON literal that is safe to place inside an HTML <script> element."""
    text = json.dumps(value, separators=(",", ":"))
    for char, escape in _SCRIPT_ESCAPES.items():
        text = text.replace(char, escape)
    return text


class CodeEmitter:
    def __init__(self, function_name: str = DEFAULT_FUNCTION_NAME) -> None:
        if not _IDENTIFIER.match(function_name):
            raise ConfigurationError(f"not a valid JavaScript identifier: {function_name!r}")
        self.function_name = function_name

    def emit(
        self,
        method: str | HttpMethod,
        url: str,
        headers: HeaderInput = None,
        body: Any = None,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        return self.render(OutboundRequest.build(method, url, headers, body, options))

    def render(self, request: OutboundRequest) -> str:
        return _ROUTINE.substitute(
            name=self.function_name,
            method=script_literal(request.method),
            url=script_literal(request.url),
            headers=script_literal([list(pair) for pair in request.headers]),
            options=self._options(request.options),
            marker=script_literal(JSON_MARKER),
            body=self._body(request),
        )

    def _body(self, request: OutboundRequest) -> str:
        body = request.body
        if isinstance(body, StructuredBody):
            return script_literal(body.serialized)
        if isinstance(body, RawBody):
            if isinstance(body.payload, str):
                return script_literal(body.payload)
            try:
                return script_literal(body.payload.decode("utf-8"))
            except UnicodeDecodeError:
                encoded = base64.b64encode(body.payload).decode("ascii")
                return f"Uint8Array.from(atob({script_literal(encoded)}), function (c) {{ return c.charCodeAt(0); }})"
        return "null"

    def _options(self, options: Mapping[str, Any]) -> str:
        lines = []
        for key, value in options.items():
            if key == "timeout" and isinstance(value, (int, float)) and not isinstance(value, bool):
                lines.append(f"    xhr.timeout = {int(float(value) * 1000)};\n")
            elif key in ("with_credentials", "withCredentials"):
                lines.append(f"    xhr.withCredentials = {'true' if value else 'false'};\n")
            else:
                logger.debug("option %r has no browser equivalent, skipped", key)
        return "".join(lines)
