# File: src/mstair/beanpath/xlogging/logger_formatter.py
"""
Colorized log record formatting for the root stderr handler.

Adds the record attributes ``levelName``, ``fileAndLine`` and ``klassAndMethod``
for use in format strings. Colors are emitted only in desktop mode; timestamps
are rendered in the timezone named by ``LOG_TZ`` (default UTC).
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Final

import pytz
from colorama import Fore

import mstair.beanpath.base.config as cfg
from mstair.beanpath.base.fs_helpers import fs_find_pyproject_toml

from .logger_constants import K_KLASS_NAME


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to an ANSI escape code for terminal color output.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    :return: ANSI escape code for the color.
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


COLOR_MAP: Final[dict[str | None, str]] = {
    "fileAndLine": rgb_code(64, 128, 160),
    "klassAndMethod": rgb_code(48, 192, 160),
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(96, 96, 96),
    "CONSTRUCT": rgb_code(176, 176, 224),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: str | None = None) -> str:
    """
    Return the escape code for a color key, or "" outside desktop mode.

    Keys may be COLOR_MAP names, ``#rrggbb`` strings, or colorama ``Fore``
    names such as ``"red"`` or ``"light_blue"``. Unknown keys reset the color.
    """
    if not cfg.in_desktop_mode():
        return ""
    if not key or key == "RESET":
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if re.fullmatch(r"#[0-9a-fA-F]{6}", key):
        return rgb_code(*(int(key[i : i + 2], 16) for i in (1, 3, 5)))
    fore_name = key.upper().replace("BRIGHT", "LIGHT")
    if fore_name.startswith("LIGHT_"):
        fore_name = fore_name.replace("_", "", 1)
    if "LIGHT" in fore_name and not fore_name.endswith("_EX"):
        fore_name += "_EX"
    return getattr(Fore, fore_name, Fore.RESET)


class CoreFormatter(logging.Formatter):
    """
    Formatter for CoreLogger records: project-relative file locations,
    class and method names, and color-coded level names.
    """

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.tz = pytz.timezone(os.environ.get("LOG_TZ", "UTC"))

    def format(self, record: logging.LogRecord) -> str:
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        return super().format(record)

    @staticmethod
    def format_file(file: str) -> str:
        """Return the file path relative to the project root when one is found."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        root = fs_find_pyproject_toml(start_dir=path.parent)
        if root is not None:
            try:
                return path.relative_to(root).as_posix()
            except ValueError:
                pass
        return path.as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        text = f"{self.format_file(file)}:{lineno}"
        return get_color_code("fileAndLine") + text + get_color_code()

    @staticmethod
    def format_klassAndMethod(record: logging.LogRecord) -> str:
        klass_name: str = getattr(record, K_KLASS_NAME, "")
        if not klass_name:
            text = record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
        elif record.funcName == "__init__":
            text = f"{klass_name}()"
        else:
            text = f"{klass_name}.{record.funcName}()"
        return get_color_code("klassAndMethod") + text + get_color_code()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, self.tz)
        text = stamp.strftime(datefmt) if datefmt else stamp.isoformat(timespec="milliseconds")
        return get_color_code(record.levelname) + text + get_color_code()


# End of file: src/mstair/beanpath/xlogging/logger_formatter.py
