"""Response writers: an in-memory recorder and a status/size tracking wrapper."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union
from wsgiref.headers import Headers

from spritz.mode import DEBUG_MODE, mode

NO_WRITTEN = -1
DEFAULT_STATUS = 200

_log = logging.getLogger(__name__)


class ResponseRecorder:
    """A response writer that keeps the status, headers and body in memory."""

    def __init__(self) -> None:
        self.code = DEFAULT_STATUS
        self.body = bytearray()
        self.headers = Headers([])
        self.wrote_header = False
        self.flushed = False

    def header(self) -> Headers:
        """The response headers."""
        return self.headers

    def write_header(self, code: int) -> None:
        """Record the status code; only the first call counts."""
        if self.wrote_header:
            return
        self.code = code
        self.wrote_header = True

    def write(self, data: Union[bytes, bytearray]) -> int:
        """Append to the body, sending a 200 header first if none was sent."""
        if not self.wrote_header:
            self.write_header(DEFAULT_STATUS)
        self.body.extend(data)
        return len(data)

    def flush(self) -> None:
        """Mark the response as flushed."""
        if not self.wrote_header:
            self.write_header(DEFAULT_STATUS)
        self.flushed = True


class ResponseWriter:
    """Wraps a response writer, tracking the status code and bytes written."""

    def __init__(self, writer: Any = None) -> None:
        self._writer = writer
        self._size = NO_WRITTEN
        self._status = DEFAULT_STATUS

    def unwrap(self) -> Any:
        """The wrapped writer."""
        return self._writer

    def reset(self, writer: Any) -> None:
        """Start over with a new underlying writer."""
        self._writer = writer
        self._size = NO_WRITTEN
        self._status = DEFAULT_STATUS

    def header(self) -> Headers:
        """The underlying writer's headers."""
        return self._writer.header()

    def write_header(self, code: int) -> None:
        """Remember the status to send; ignored once headers are out."""
        if code > 0 and self._status != code:
            if self.written():
                if mode() == DEBUG_MODE:
                    _log.warning(
                        "[WARNING] Headers were already written. "
                        "Wanted to override status code %d with %d",
                        self._status,
                        code,
                    )
                return
            self._status = code

    def write_header_now(self) -> None:
        """Send the status and headers if not done yet."""
        if not self.written():
            self._size = 0
            self._writer.write_header(self._status)

    def write(self, data: Union[bytes, bytearray]) -> int:
        """Write body bytes, sending headers first."""
        self.write_header_now()
        count = self._writer.write(data)
        self._size += count
        return count

    def write_string(self, s: str) -> int:
        """Write a string as UTF-8 body bytes."""
        return self.write(s.encode("utf-8"))

    def status(self) -> int:
        """The response status code."""
        return self._status

    def size(self) -> int:
        """Bytes written to the body, or -1 when headers are not out yet."""
        return self._size

    def written(self) -> bool:
        """Whether the headers have been sent."""
        return self._size != NO_WRITTEN

    def hijack(self) -> Any:
        """Take over the connection from the underlying writer."""
        if self._size < 0:
            self._size = 0
        hijack = getattr(self._writer, "hijack", None)
        if hijack is None:
            raise TypeError("underlying response writer does not support hijacking")
        return hijack()

    def close_notify(self) -> Any:
        """Ask the underlying writer for a close notification."""
        close_notify = getattr(self._writer, "close_notify", None)
        if close_notify is None:
            raise TypeError("underlying response writer does not support close notification")
        return close_notify()

    def flush(self) -> None:
        """Send headers and flush the underlying writer."""
        self.write_header_now()
        flush = getattr(self._writer, "flush", None)
        if flush is None:
            raise TypeError("underlying response writer does not support flushing")
        flush()

    def pusher(self) -> Optional[Any]:
        """The underlying writer if it supports server push, else None."""
        if callable(getattr(self._writer, "push", None)):
            return self._writer
        return None