# File: src/mstair/beanpath/base/config.py
"""
Execution context and engine settings.

Settings are read from the environment (after loading a ``.env`` file once)
and may be overridden per thread. Overrides live in thread-local storage so
that a test or a worker thread can change behavior without affecting others.

Exports:
- in_test_mode(): check or override whether code runs under a test runner.
- in_desktop_mode(): check or override whether output goes to a terminal.
- failure_style(): wrapping style applied at access boundaries.
- failure_style_context(): temporarily change the wrapping style.
- message_width(): maximum rendered width of objects in failure messages.

Environment:
- BEANPATH_FAILURE_STYLE: one of DEFAULT, MERGED, WRAPPED, UNWRAPPED.
- BEANPATH_MESSAGE_WIDTH: positive integer.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import cache
from typing import Final

from mstair.beanpath.base.fs_helpers import fs_load_dotenv


FAILURE_STYLES: Final[tuple[str, ...]] = ("DEFAULT", "MERGED", "WRAPPED", "UNWRAPPED")
DEFAULT_FAILURE_STYLE: Final[str] = "WRAPPED"
DEFAULT_MESSAGE_WIDTH: Final[int] = 200

_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local overrides for context flags and engine settings."""

    in_test_mode_override: bool | None = None
    in_desktop_mode_override: bool | None = None
    failure_style_override: str | None = None
    message_width_override: int | None = None


def _get_tls() -> TLSAttrs:
    """Return the current thread's TLSAttrs instance, initializing if needed."""
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


@cache
def _load_environment() -> bool:
    """Load the nearest .env file once per process."""
    return fs_load_dotenv()


def _environ(name: str) -> str:
    _load_environment()
    return os.environ.get(name, "").strip()


def in_test_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Check if running under a test runner, with optional override.

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
    if "pytest" in sys.modules:
        return True
    return bool(os.environ.get("PYTEST_CURRENT_TEST")) or os.environ.get("CI") == "true"


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine if log output should carry terminal colors.

    Rules:
      - Explicit override wins.
      - Returns True in test mode.
      - Otherwise True only when stderr is attached to a terminal.

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
    if in_test_mode():
        return True
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def failure_style(
    *,
    unset_override: bool = False,
    override: str | None = None,
) -> str:
    """
    Return the name of the failure wrapping style for this thread.

    Unknown names in the environment fall back to the default style; unknown
    names passed as override are rejected.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: Style name to set as override for this thread.
    :return: Upper-case style name, one of FAILURE_STYLES.
    :raises ValueError: If the override is not a known style name.
    """
    tls = _get_tls()
    if unset_override:
        tls.failure_style_override = None
    if override is not None:
        name = override.strip().upper()
        if name not in FAILURE_STYLES:
            raise ValueError(f"unknown failure style: {override!r}")
        tls.failure_style_override = name
        return name
    if tls.failure_style_override is not None:
        return tls.failure_style_override
    name = _environ("BEANPATH_FAILURE_STYLE").upper()
    return name if name in FAILURE_STYLES else DEFAULT_FAILURE_STYLE


@contextmanager
def failure_style_context(style: str) -> Iterator[None]:
    """
    Context manager to apply a failure wrapping style temporarily.

    Restores the previous override on exit. Nested contexts are supported.
    """
    tls = _get_tls()
    previous = tls.failure_style_override
    failure_style(override=style)
    try:
        yield
    finally:
        tls.failure_style_override = previous


def message_width(
    *,
    unset_override: bool = False,
    override: int | None = None,
) -> int:
    """
    Return the maximum width of an object rendered into a failure message.

    :param unset_override: If True, clears any prior override for this thread.
    :param override: Positive width to set as override for this thread.
    :return: The effective width.
    """
    tls = _get_tls()
    if unset_override:
        tls.message_width_override = None
    if override is not None:
        tls.message_width_override = max(override, 16)
        return tls.message_width_override
    if tls.message_width_override is not None:
        return tls.message_width_override
    raw = _environ("BEANPATH_MESSAGE_WIDTH")
    if raw.isdigit() and int(raw) >= 16:
        return int(raw)
    return DEFAULT_MESSAGE_WIDTH


# End of file: src/mstair/beanpath/base/config.py
