"""Access-log formatting: colours, durations and the default line format."""

from __future__ import annotations

import dataclasses
import datetime
import enum
from typing import Any, Optional

GREEN = "\033[97;42m"
WHITE = "\033[90;47m"
YELLOW = "\033[90;43m"
RED = "\033[97;41m"
BLUE = "\033[97;44m"
MAGENTA = "\033[97;45m"
CYAN = "\033[97;46m"
RESET = "\033[0m"

_METHOD_COLORS = {
    "GET": BLUE,
    "POST": CYAN,
    "PUT": YELLOW,
    "DELETE": RED,
    "PATCH": GREEN,
    "HEAD": MAGENTA,
    "OPTIONS": WHITE,
}

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000
_NS_PER_MIN = 60 * _NS_PER_S


class ColorMode(enum.Enum):
    """Whether log lines are coloured."""

    AUTO = "auto"
    DISABLE = "disable"
    FORCE = "force"


_console_color_mode = ColorMode.AUTO


def disable_console_color() -> None:
    """Never colour log output."""
    global _console_color_mode
    _console_color_mode = ColorMode.DISABLE


def force_console_color() -> None:
    """Always colour log output."""
    global _console_color_mode
    _console_color_mode = ColorMode.FORCE


def console_color_mode() -> ColorMode:
    """The current colour mode."""
    return _console_color_mode


@dataclasses.dataclass
class LogFormatterParams:
    """Everything a log formatter is given about one handled request."""

    request: Any = None
    timestamp: datetime.datetime = dataclasses.field(
        default_factory=lambda: datetime.datetime.fromtimestamp(0, datetime.timezone.utc)
    )
    status_code: int = 0
    latency: datetime.timedelta = dataclasses.field(default_factory=datetime.timedelta)
    client_ip: str = ""
    method: str = ""
    path: str = ""
    error_message: str = ""
    is_term: bool = False
    body_size: int = 0
    keys: Optional[dict] = None

    def status_code_color(self) -> str:
        """The ANSI colour for the status code."""
        code = self.status_code
        if 100 <= code < 200:
            return WHITE
        if 200 <= code < 300:
            return GREEN
        if 300 <= code < 400:
            return WHITE
        if 400 <= code < 500:
            return YELLOW
        return RED

    def method_color(self) -> str:
        """The ANSI colour for the request method."""
        return _METHOD_COLORS.get(self.method, RESET)

    def reset_color(self) -> str:
        """The ANSI sequence that resets all attributes."""
        return RESET

    def is_output_color(self) -> bool:
        """Whether the line should be coloured."""
        return _console_color_mode is ColorMode.FORCE or (
            _console_color_mode is ColorMode.AUTO and self.is_term
        )


def _fraction(value: int, scale: int) -> str:
    whole, remainder = divmod(value, scale)
    if not remainder:
        return str(whole)
    digits = len(str(scale)) - 1
    return f"{whole}.{str(remainder).rjust(digits, '0').rstrip('0')}"


def format_duration(latency: datetime.timedelta) -> str:
    """Render a duration compactly, e.g. ``1.5ms``, ``5s`` or ``2743h29m3s``."""
    nanoseconds = (latency // datetime.timedelta(microseconds=1)) * _NS_PER_US
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)
    if value < _NS_PER_S:
        if value < _NS_PER_US:
            return f"{sign}{value}ns"
        if value < _NS_PER_MS:
            return f"{sign}{_fraction(value, _NS_PER_US)}µs"
        return f"{sign}{_fraction(value, _NS_PER_MS)}ms"
    text = _fraction(value % _NS_PER_MIN, _NS_PER_S) + "s"
    minutes = value // _NS_PER_MIN
    if minutes:
        hours, minutes = divmod(minutes, 60)
        text = f"{minutes}m{text}"
        if hours:
            text = f"{hours}h{text}"
    return sign + text


_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def _quote(text: str) -> str:
    out = []
    for ch in text:
        code = ord(ch)
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x80:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    return '"' + "".join(out) + '"'


def default_log_formatter(params: LogFormatterParams) -> str:
    """The standard access-log line for one request."""
    status_color = method_color = reset_color = ""
    if params.is_output_color():
        status_color = params.status_code_color()
        method_color = params.method_color()
        reset_color = params.reset_color()

    latency = params.latency
    if latency > datetime.timedelta(minutes=1):
        latency -= datetime.timedelta(microseconds=latency.microseconds)

    stamp = params.timestamp.strftime("%Y/%m/%d - %H:%M:%S")
    return (
        f"[SPRITZ] {stamp} |{status_color} {params.status_code:3d} {reset_color}|"
        f" {format_duration(latency):>13} | {params.client_ip:>15} |"
        f"{method_color} {params.method:<7} {reset_color} {_quote(params.path)}\n"
        f"{params.error_message}"
    )