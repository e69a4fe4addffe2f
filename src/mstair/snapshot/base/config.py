# File: src/mstair/snapshot/base/config.py
"""
Execution context detection utilities.

This module answers two questions that shape ambient behavior across the package:
whether the process is running under a test runner, and whether log output should
be decorated for an interactive terminal. Overrides are stored in thread-local
storage so that one thread's override never leaks into another.

Exports:
- in_test_mode(): check or override whether code is in test mode.
- in_desktop_mode(): check or override whether output targets an interactive terminal.
- forced_test_mode(): temporarily force test mode on this thread.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


__all__ = [
    "in_desktop_mode",
    "in_test_mode",
    "forced_test_mode",
]

_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local flags for environment context."""

    in_test_mode_override: bool | None = None
    in_desktop_mode_override: bool | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running in test mode, with optional override.

    Detection order:
      1. Explicit override (thread-local).
      2. Presence of pytest/unittest in sys.modules.
      3. Known environment variables (e.g. PYTEST_CURRENT_TEST, CI).

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if test mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_test_mode_override = None
    if override is not None:
        tls.in_test_mode_override = override
        return override
    if tls.in_test_mode_override is not None:
        return tls.in_test_mode_override
    if "pytest" in sys.modules or "unittest" in sys.modules:
        return True

    env = os.environ
    return bool(
        any(env.get(k) for k in ("PYTEST_CURRENT_TEST", "PYTEST_RUNNING", "UNITTEST_RUNNING"))
        or env.get("CI") == "true"
    )


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine if output should be formatted for interactive display.

    Rules:
      - Explicit override wins.
      - NO_COLOR in the environment disables desktop mode.
      - Returns True in test mode.
      - Otherwise True when stderr is a terminal.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: If True or False, sets the override for this thread.
    :return: True if desktop mode is active, False otherwise.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_desktop_mode_override = None
    if override is not None:
        tls.in_desktop_mode_override = override
        return override
    if tls.in_desktop_mode_override is not None:
        return tls.in_desktop_mode_override

    if os.environ.get("NO_COLOR"):
        return False
    if in_test_mode():
        return True
    stream = sys.stderr
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


@contextmanager
def forced_test_mode(enabled: bool = True) -> Iterator[None]:
    """
    Temporarily force test mode on for the current thread.

    Restores the previous override on exit. Nested contexts are supported.
    """
    tls = _get_tls()
    previous = tls.in_test_mode_override
    tls.in_test_mode_override = enabled
    try:
        yield
    finally:
        tls.in_test_mode_override = previous


# End of file: src/mstair/snapshot/base/config.py
