# File: src/mstair/beanpath/xlogging/core_logger.py
"""
Structured logging for the access engine.

Example:
    >>> from mstair.beanpath.xlogging.logger_factory import create_logger
    >>> logger = create_logger(__name__)
    >>> with logger.prefix_with("[write]"):
    ...     logger.trace("segment %s", "items[0]")

Features:
- Custom levels: TRACE (below DEBUG) and CONSTRUCT (below INFO)
- construct() for structured construction events
- Context-local message prefixes via prefix_with()
- Non-primitive arguments rendered with pretty() before formatting

Design:
- Only the root logger owns handlers; CoreLogger instances propagate.
- Per-logger levels come from LogLevelConfig, never below the root level.
- initialize_root() is the only entry point for root setup.
"""

from __future__ import annotations

import contextvars
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, TextIO

from mstair.beanpath.base.string_helpers import pretty
from mstair.beanpath.base.types import PRIMITIVE_TYPES

from .logger_constants import CONSTRUCT, K_KLASS_NAME, TRACE, initialize_logger_constants
from .logger_formatter import CoreFormatter
from .logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_ROOT_ATTR_NAME = "_beanpath_corelogger_initialized"
_LOG_KWARGS_STANDARD: frozenset[str] = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Logger with TRACE/CONSTRUCT levels, scoped prefixes and safe argument rendering.

    Handlers are not attached here; records propagate to the root logger,
    which initialize_root() equips with a CoreFormatter stderr handler.
    """

    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2  # log() + level wrapper (debug/trace/...)

    def __init__(self, name: str, level: int | str = logging.NOTSET) -> None:
        """
        Initialize the logger, resolving an unset level from the environment.

        :param name: Logger name, typically the module name.
        :param level: Initial level; NOTSET defers to LogLevelConfig.
        """
        initialize_logger_constants()
        if level in (logging.NOTSET, "NOTSET", ""):
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

        root_level = logging.getLogger().getEffectiveLevel()
        if self.level < root_level:
            self.setLevel(root_level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        """
        Emit a record, applying the active prefix and rendering non-primitive args.

        Unknown keyword arguments are moved into ``extra``.
        """
        initialize_root()
        if not self.isEnabledFor(level):
            return

        extra: dict[str, Any] = kwargs.pop("extra", None) or {}
        for key in [k for k in kwargs if k not in _LOG_KWARGS_STANDARD]:
            extra[key] = kwargs.pop(key)
        klass_name = _caller_class_name(kwargs.get("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET - 1)
        if klass_name:
            extra.setdefault(K_KLASS_NAME, klass_name)

        prefix = _log_prefix.get()
        text = msg if isinstance(msg, str) else str(msg)
        stacklevel: int = kwargs.pop("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET
        super().log(
            level,
            f"{prefix}{text}",
            *(arg if isinstance(arg, PRIMITIVE_TYPES) else pretty(arg) for arg in args),
            exc_info=kwargs.get("exc_info"),
            stack_info=kwargs.get("stack_info", False),
            stacklevel=stacklevel,
            extra=extra,
        )

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self.log(TRACE, msg, *args, **kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at DEBUG level."""
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def construct(self, type_: type | str, id: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a construction event at CONSTRUCT level.

        The message names the constructed type and instance id, followed by
        each extra argument rendered with pretty(). The id is not treated as
        a format string.

        :param type_: Class (or class name) of the constructed object.
        :param id: Instance identifier.
        :param args: Optional metadata shown after the id.
        :param kwargs: Passed to log().
        """
        name = type_ if isinstance(type_, str) else type_.__name__
        text = f"\n  {name.rsplit('.', 1)[-1]}:\n    {id}"
        for arg in args:
            text += f", {pretty(arg)}"
        self.log(CONSTRUCT, text, **kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at INFO level."""
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at WARNING level."""
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at ERROR level."""
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: object, *args: Any, exc_info: Any = True, **kwargs: Any) -> None:
        """Log a message at ERROR level with exception info."""
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at CRITICAL level."""
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix all log messages emitted within the current context.

        Nested prefixes accumulate. Uses contextvars, so prefixes are local to
        the current thread or task.

        :param prefix: Text prepended (followed by " > ") to each message.
        """
        current = _log_prefix.get()
        token = _log_prefix.set(f"{current}{prefix} > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently configure the root logger for CoreLogger output.

    - Ensures one stderr StreamHandler using CoreFormatter exists.
    - With `force=True`, replaces existing stderr handlers.
    - Sets the root level to `level`, or WARNING if the root is unset.
    - Leaves handlers owned by the host application untouched.

    :param fmt: Format string. Defaults to LOG_FORMAT or the package default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT, else ISO timestamps.
    :param level: Root level (int or name).
    :param force: Reinitialize even if already initialized.
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if force:
        for handler in stderr_handlers:
            root.removeHandler(handler)
        stderr_handlers = []

    fmt = fmt or os.environ.get("LOG_FORMAT", "%(levelName)s %(fileAndLine)s %(klassAndMethod)s %(message)s")
    datefmt = datefmt or os.environ.get("LOG_DATEFMT") or None
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CoreFormatter(fmt, datefmt))
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(CoreFormatter(fmt, datefmt))

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.getEffectiveLevel() == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _caller_class_name(stacklevel: int) -> str:
    """Return the class name of ``self`` in the frame `stacklevel` levels above log()."""
    frame = sys._getframe(1)
    try:
        for _ in range(stacklevel):
            if frame.f_back is None:
                break
            frame = frame.f_back
        owner = frame.f_locals.get("self")
        return type(owner).__name__ if owner is not None else ""
    finally:
        del frame


# End of file: src/mstair/beanpath/xlogging/core_logger.py
