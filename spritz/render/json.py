"""JSON renderers: plain, indented, secure, JSONP, ASCII-only and unescaped."""

from __future__ import annotations

import base64
import dataclasses
import json
from typing import Any, Optional

from spritz.render.base import Render, write_content_type

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
JSONP_CONTENT_TYPE = "application/javascript; charset=utf-8"
JSON_ASCII_CONTENT_TYPE = "application/json"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "<": "\\u003C",
    ">": "\\u003E",
    "&": "\\u0026",
    "=": "\\u003D",
}


def _default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    as_json = getattr(obj, "as_json", None)
    if callable(as_json):
        return as_json()
    raise TypeError(f"json: unsupported type: {type(obj).__name__}")


def _encode(obj: Any, indent: Optional[int] = None, escape_html: bool = True) -> str:
    separators = (",", ": ") if indent is not None else (",", ":")
    text = json.dumps(
        obj,
        default=_default,
        sort_keys=True,
        ensure_ascii=False,
        allow_nan=False,
        indent=indent,
        separators=separators,
    )
    if escape_html:
        text = "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)
    return text


def marshal(obj: Any) -> bytes:
    """Compact JSON with sorted keys and HTML-sensitive characters escaped."""
    return _encode(obj).encode("utf-8")


def js_escape_string(s: str) -> str:
    """Escape ``s`` so it can be placed safely inside JavaScript source."""
    out = []
    for ch in s:
        if ch in _JS_ESCAPES:
            out.append(_JS_ESCAPES[ch])
        elif ch < " ":
            out.append(f"\\u{ord(ch):04X}")
        elif ord(ch) < 0x80 or ch.isprintable():
            out.append(ch)
        else:
            out.append(f"\\u{ord(ch):04X}")
    return "".join(out)


def write_json(w: Any, obj: Any) -> None:
    """Write the JSON content type and ``obj`` encoded as JSON."""
    write_content_type(w, JSON_CONTENT_TYPE)
    w.write(marshal(obj))


@dataclasses.dataclass
class JSON(Render):
    """Data encoded as compact JSON."""

    data: Any = None

    def render(self, w: Any) -> None:
        write_json(w, self.data)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclasses.dataclass
class IndentedJSON(Render):
    """Data encoded as JSON indented by four spaces."""

    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write(_encode(self.data, indent=4).encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclasses.dataclass
class SecureJSON(Render):
    """JSON whose array output is preceded by a prefix that stops script inclusion."""

    prefix: str = ""
    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        payload = marshal(self.data)
        if payload.startswith(b"[") and payload.endswith(b"]"):
            w.write(self.prefix.encode("utf-8"))
        w.write(payload)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)


@dataclasses.dataclass
class JsonpJSON(Render):
    """JSON wrapped in a call to a JavaScript callback."""

    callback: str = ""
    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        payload = marshal(self.data)
        if not self.callback:
            w.write(payload)
            return
        w.write(js_escape_string(self.callback).encode("utf-8"))
        w.write(b"(")
        w.write(payload)
        w.write(b");")

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSONP_CONTENT_TYPE)


@dataclasses.dataclass
class AsciiJSON(Render):
    """JSON with every non-ASCII character written as a \\u escape."""

    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        text = marshal(self.data).decode("utf-8")
        escaped = "".join(ch if ord(ch) < 0x80 else f"\\u{ord(ch):04x}" for ch in text)
        w.write(escaped.encode("ascii"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_ASCII_CONTENT_TYPE)


@dataclasses.dataclass
class PureJSON(Render):
    """JSON without HTML escaping, followed by a newline."""

    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write((_encode(self.data, escape_html=False) + "\n").encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, JSON_CONTENT_TYPE)