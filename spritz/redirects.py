"""Targets and status codes for the router's automatic redirects."""

from __future__ import annotations

import http
import posixpath
import re
from typing import Optional

_UNSAFE_PREFIX_CHARS = re.compile(r"[^a-zA-Z0-9/-]+")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def safe_prefix(prefix: str) -> Optional[str]:
    """Sanitise an X-Forwarded-Prefix value; None when it names no prefix."""
    cleaned = posixpath.normpath(prefix) if prefix else "."
    if cleaned == ".":
        return None
    cleaned = _UNSAFE_PREFIX_CHARS.sub("", cleaned)
    return _REPEATED_SLASHES.sub("/", cleaned)


def trailing_slash_target(path: str, forwarded_prefix: str = "") -> str:
    """The path to redirect to: ``path`` with its trailing slash added or removed."""
    prefix = safe_prefix(forwarded_prefix)
    p = path if prefix is None else prefix + "/" + path
    if len(p) > 1 and p.endswith("/"):
        return p[:-1]
    return p + "/"


def redirect_code(method: str) -> int:
    """301 for GET requests, 307 for every other method."""
    if method == "GET":
        return http.HTTPStatus.MOVED_PERMANENTLY
    return http.HTTPStatus.TEMPORARY_REDIRECT