# File: src/mstair/beanpath/xlogging/logger_util.py
"""
Environment variable-driven log level configuration.

Sources, read after loading a ``.env`` file:
- Pattern DSL strings in LOG_LEVEL / LOG_LEVELS, e.g.
  ``LOG_LEVELS="mstair.beanpath.*:TRACE; root=WARNING"``
- Per-logger overrides in LOG_LEVEL_<NAME>, where ``_`` stands for ``.``
  and ``__`` for a literal underscore, e.g. ``LOG_LEVEL_MSTAIR_BEANPATH=DEBUG``

This module only resolves the desired level for a logger name. The root
logger level is left to initialize_root() in core_logger.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final, NamedTuple

from mstair.beanpath.base.fs_helpers import fs_load_dotenv
from mstair.beanpath.xlogging.logger_constants import initialize_logger_constants


__all__ = ["LogLevelConfig"]

_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")
_VAR_NAME_RX: Final[re.Pattern[str]] = re.compile(r"^LOG_LEVELS?(?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$")

_log_level_config_instance: LogLevelConfig | None = None


class PatternLevel(NamedTuple):
    """Mapping from a logger-name pattern to an integer log level."""

    pattern: str
    level: int


def _module_from_suffix(suffix: str) -> str:
    """Translate an env var suffix such as ``_MY__APP_CORE`` into ``my_app.core``."""
    suffix = suffix.lstrip("_")
    if not suffix or suffix.upper() == "ROOT":
        return ""
    return suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()


def _iter_log_vars() -> Iterator[tuple[str, str]]:
    """Yield (module, value) for every LOG_LEVEL* variable, most specific names last."""
    fs_load_dotenv()
    for name, value in sorted(os.environ.items()):
        match = _VAR_NAME_RX.match(name)
        if match is not None:
            yield _module_from_suffix(match["SUFFIX"]), value


@dataclass(slots=True)
class LogLevelConfig:
    """
    Resolve log levels for logger names from environment variables.

    Precedence: exact > ancestor > best glob > default > fallback.
    """

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the shared LogLevelConfig, creating it on first use."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            initialize_logger_constants()
            _log_level_config_instance = cls()
        return _log_level_config_instance

    def update_from_environment(self) -> None:
        """Rebuild the pattern->level mapping from the current environment."""
        self.pattern_to_level.clear()
        level_names = self._level_names()
        for module, value in _iter_log_vars():
            for item in self.parse_fragments(module, value, level_names):
                self.pattern_to_level[item.pattern] = item.level

    @staticmethod
    def parse_fragments(
        module: str, value: str, level_names: dict[str, int]
    ) -> Iterator[PatternLevel]:
        """
        Parse one variable value into pattern->level pairs.

        A bare level applies to `module` (or the default when `module` is empty);
        ``pattern:LEVEL`` applies to ``module.pattern``. Unknown level names are skipped.
        """
        for fragment in _FRAGMENT_SEPARATOR_RX.split(value):
            fragment = fragment.strip()
            if not fragment:
                continue
            parts = _ASSIGNMENT_OPERATOR_RX.split(fragment, maxsplit=1)
            pattern = parts[0].strip().strip("'\"") if len(parts) == 2 else ""
            level_name = parts[-1].strip().strip("'\"").upper()
            if pattern.lower() == "root":
                pattern = ""
            if module:
                pattern = f"{module}.{pattern}" if pattern else module
            level = level_names.get(level_name)
            if level is None or level == logging.NOTSET:
                continue
            yield PatternLevel(pattern, level)

    def get_effective_level(self, logger_name: str, *, default: int = logging.WARNING) -> int:
        """Return the configured level for a logger name."""
        name = logger_name.lower()
        named = {k.lower(): v for k, v in self.pattern_to_level.items() if k}

        if name in named:
            return named[name]

        parts = name.split(".")
        for end in range(len(parts) - 1, 0, -1):
            ancestor = ".".join(parts[:end])
            if ancestor in named:
                return named[ancestor]

        best: tuple[int, int] | None = None
        for pattern, level in named.items():
            if not any(ch in pattern for ch in "*?[") or not fnmatch.fnmatchcase(name, pattern):
                continue
            score = min((i for i, ch in enumerate(pattern) if ch in "*?["), default=len(pattern))
            if best is None or score > best[0]:
                best = (score, level)
        if best is not None:
            return best[1]

        return self.pattern_to_level.get("", default)

    @staticmethod
    def _level_names() -> dict[str, int]:
        initialize_logger_constants()
        return {
            k.upper(): v
            for k, v in logging.getLevelNamesMapping().items()
            if isinstance(k, str) and k.isupper()
        }


# End of file: src/mstair/beanpath/xlogging/logger_util.py
