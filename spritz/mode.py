"""Process-wide run mode: debug, release or test."""

from __future__ import annotations

import os
import threading

ENV_MODE = "SPRITZ_MODE"

DEBUG_MODE = "debug"
RELEASE_MODE = "release"
TEST_MODE = "test"

_MODES = (DEBUG_MODE, RELEASE_MODE, TEST_MODE)

_lock = threading.Lock()
_current = DEBUG_MODE


def _running_under_tests() -> bool:
    return "PYTEST_CURRENT_TEST" in os.environ


def set_mode(value: str) -> None:
    """Set the run mode; an empty value picks test mode under a test run, debug otherwise."""
    global _current
    if not value:
        value = TEST_MODE if _running_under_tests() else DEBUG_MODE
    if value not in _MODES:
        raise ValueError(f"mode unknown: {value} (available mode: debug release test)")
    with _lock:
        _current = value


def mode() -> str:
    """The current run mode."""
    with _lock:
        return _current


set_mode(os.environ.get(ENV_MODE, ""))