"""Errors collected while a request is handled."""

from __future__ import annotations

import dataclasses
import enum
import json
from collections.abc import Mapping
from typing import Any, Optional


class ErrorType(enum.IntFlag):
    """Bit flags classifying a context error."""

    BIND = 1 << 63
    RENDER = 1 << 62
    PRIVATE = 1 << 0
    PUBLIC = 1 << 1
    ANY = (1 << 64) - 1
    NU = 2


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _dumps(obj: Any) -> bytes:
    return json.dumps(obj, default=_json_default, separators=(",", ":")).encode("utf-8")


def _format_value(value: Any) -> str:
    """Render a value the way the log output expects: maps as map[k:v], lists as [a b]."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Mapping):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        inner = " ".join(f"{_format_value(k)}:{_format_value(v)}" for k, v in items)
        return f"map[{inner}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(v) for v in value) + "]"
    return str(value)


class ContextError(Exception):
    """An error with a type and optional metadata, wrapping an underlying error."""

    def __init__(self, err: Any, type: ErrorType = ErrorType(0), meta: Any = None) -> None:
        super().__init__(err)
        self.err = err
        self.type = type
        self.meta = meta
        if isinstance(err, BaseException):
            self.__cause__ = err

    def __str__(self) -> str:
        return str(self.err)

    def set_type(self, flags: ErrorType) -> "ContextError":
        """Set the error's type and return the error."""
        self.type = flags
        return self

    def set_meta(self, data: Any) -> "ContextError":
        """Set the error's metadata and return the error."""
        self.meta = data
        return self

    def is_type(self, flags: ErrorType) -> bool:
        """Whether the error shares any bit with ``flags``."""
        return (int(self.type) & int(flags)) > 0

    def as_json(self) -> Any:
        """A JSON-ready representation of the error."""
        data: dict[str, Any] = {}
        meta = self.meta
        if meta is not None:
            if dataclasses.is_dataclass(meta) and not isinstance(meta, type):
                return meta
            if isinstance(meta, Mapping):
                for key, value in meta.items():
                    data[str(key)] = value
            else:
                data["meta"] = meta
        data.setdefault("error", str(self))
        return data

    def marshal_json(self) -> bytes:
        """Encode the error as JSON bytes."""
        return _dumps(self.as_json())


class ErrorMessages(list):
    """An ordered collection of context errors."""

    def by_type(self, typ: ErrorType) -> "ErrorMessages":
        """The errors matching ``typ``; ANY returns this collection itself."""
        if not self:
            return ErrorMessages()
        if typ == ErrorType.ANY:
            return self
        return ErrorMessages(msg for msg in self if msg.is_type(typ))

    def last(self) -> Optional[ContextError]:
        """The last error, or None when empty."""
        return self[-1] if self else None

    def errors(self) -> list[str]:
        """The messages of all errors."""
        return [str(msg) for msg in self]

    def as_json(self) -> Any:
        """None, a single error's JSON, or a list of them."""
        if not self:
            return None
        if len(self) == 1:
            return self[0].as_json()
        return [msg.as_json() for msg in self]

    def marshal_json(self) -> bytes:
        """Encode the collection as JSON bytes."""
        return _dumps(self.as_json())

    def __str__(self) -> str:
        lines = []
        for number, msg in enumerate(self, start=1):
            lines.append(f"Error #{number:02d}: {msg.err}\n")
            if msg.meta is not None:
                lines.append(f"     Meta: {_format_value(msg.meta)}\n")
        return "".join(lines)