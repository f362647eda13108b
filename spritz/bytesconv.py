"""Conversions between text and raw bytes that round-trip any byte sequence."""

from __future__ import annotations


def string_to_bytes(s: str) -> bytes:
    """Encode ``s`` as UTF-8, restoring bytes that could not be decoded earlier."""
    return s.encode("utf-8", "surrogateescape")


def bytes_to_string(b: bytes) -> str:
    """Decode ``b`` as UTF-8, keeping undecodable bytes so they can be restored."""
    return bytes(b).decode("utf-8", "surrogateescape")