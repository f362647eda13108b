"""Response renderers for raw data, text, streams, redirects and XML."""

from __future__ import annotations

import abc
import dataclasses
import http
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any, BinaryIO, Optional
from urllib.parse import urlsplit

from spritz.path import clean_path

PLAIN_CONTENT_TYPE = "text/plain; charset=utf-8"
XML_CONTENT_TYPE = "application/xml; charset=utf-8"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

_COPY_CHUNK = 32 * 1024


def write_content_type(w: Any, value: str) -> None:
    """Set the Content-Type header unless the response already has one."""
    header = w.header()
    if "Content-Type" not in header:
        header["Content-Type"] = value


class Render(abc.ABC):
    """Something that writes a complete response body with its content type."""

    @abc.abstractmethod
    def render(self, w: Any) -> None:
        """Write the content type and the body to ``w``."""

    @abc.abstractmethod
    def write_content_type(self, w: Any) -> None:
        """Write only the content type to ``w``."""


@dataclasses.dataclass
class Data(Render):
    """Raw bytes with a custom content type."""

    content_type: str = ""
    data: bytes = b""

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        w.write(bytes(self.data))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, self.content_type)


def write_string(w: Any, fmt: str, data: Optional[list] = None) -> None:
    """Write plain text; ``fmt`` is %-formatted with ``data`` when it is non-empty."""
    write_content_type(w, PLAIN_CONTENT_TYPE)
    text = fmt % tuple(data) if data else fmt
    w.write(text.encode("utf-8"))


@dataclasses.dataclass
class String(Render):
    """Plain text built from a format string and its arguments."""

    format: str = ""
    data: list = dataclasses.field(default_factory=list)

    def render(self, w: Any) -> None:
        write_string(w, self.format, self.data)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, PLAIN_CONTENT_TYPE)


@dataclasses.dataclass(kw_only=True)
class Reader(Render):
    """A stream copied to the response, with its length and extra headers."""

    content_type: str = ""
    content_length: int = 0
    reader: BinaryIO
    headers: Optional[dict[str, str]] = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        headers = dict(self.headers or {})
        if self.content_length >= 0:
            headers["Content-Length"] = str(self.content_length)
        response_headers = w.header()
        for key, value in headers.items():
            if not response_headers.get(key):
                response_headers[key] = value
        while True:
            chunk = self.reader.read(_COPY_CHUNK)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            w.write(chunk)

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, self.content_type)


def _html_escape(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&#34;")
        .replace("'", "&#39;")
    )


def _hex_escape_non_ascii(text: str) -> str:
    return "".join(
        chr(byte) if byte < 0x80 else f"%{byte:02X}" for byte in text.encode("utf-8")
    )


def _status_text(code: int) -> str:
    try:
        return http.HTTPStatus(code).phrase
    except ValueError:
        return ""


def _send_redirect(w: Any, request: Any, location: str, code: int) -> None:
    method = getattr(request, "method", "GET")
    parts = urlsplit(location)
    if not parts.scheme and not parts.netloc:
        old_path = getattr(request, "path", "") or "/"
        if not old_path.startswith("/"):
            old_path = "/" + old_path
        if not location.startswith("/"):
            old_dir = old_path[: old_path.rfind("/") + 1]
            location = old_dir + location
        query = ""
        if "?" in location:
            location, query = location.split("?", 1)
            query = "?" + query
        trailing = location.endswith("/")
        location = clean_path(location)
        if trailing and not location.endswith("/"):
            location += "/"
        location += query

    header = w.header()
    had_content_type = "Content-Type" in header
    header["Location"] = _hex_escape_non_ascii(location)
    if not had_content_type and method in ("GET", "HEAD"):
        header["Content-Type"] = HTML_CONTENT_TYPE
    w.write_header(code)
    if not had_content_type and method == "GET":
        body = f'<a href="{_html_escape(location)}">{_status_text(code)}</a>.\n'
        w.write(body.encode("utf-8"))


@dataclasses.dataclass
class Redirect(Render):
    """A redirect of ``request`` to ``location`` with a 3xx (or 201) status."""

    code: int
    request: Any
    location: str

    def render(self, w: Any) -> None:
        if (self.code < 300 or self.code > 308) and self.code != 201:
            raise ValueError(f"Cannot redirect with status code {self.code}")
        _send_redirect(w, self.request, self.location, self.code)

    def write_content_type(self, w: Any) -> None:
        """A redirect sets no content type of its own."""


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _append(element, str(key), item)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        for field in dataclasses.fields(value):
            _append(element, field.name, getattr(value, field.name))
    elif value is None:
        return
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    else:
        element.text = str(value)


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    if isinstance(value, (list, tuple)):
        for item in value:
            _append(parent, tag, item)
        return
    child = ET.SubElement(parent, tag)
    _fill(child, value)


def _to_element(data: Any) -> ET.Element:
    if isinstance(data, ET.Element):
        return data
    to_xml = getattr(data, "to_xml", None)
    if callable(to_xml):
        return to_xml()
    if isinstance(data, Mapping):
        tag = "map"
    elif dataclasses.is_dataclass(data) and not isinstance(data, type):
        tag = type(data).__name__
    else:
        raise TypeError(f"xml: unsupported type: {type(data).__name__}")
    element = ET.Element(tag)
    _fill(element, data)
    return element


@dataclasses.dataclass
class XML(Render):
    """Data encoded as XML: elements, mappings, dataclasses or objects with ``to_xml``."""

    data: Any = None

    def render(self, w: Any) -> None:
        self.write_content_type(w)
        element = _to_element(self.data)
        text = ET.tostring(element, encoding="unicode", short_empty_elements=False)
        w.write(text.encode("utf-8"))

    def write_content_type(self, w: Any) -> None:
        write_content_type(w, XML_CONTENT_TYPE)