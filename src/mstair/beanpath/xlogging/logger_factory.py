# File: src/mstair/beanpath/xlogging/logger_factory.py
"""
Factory for CoreLogger instances registered in the stdlib logging hierarchy.
"""

from __future__ import annotations

import logging

from mstair.beanpath.xlogging.core_logger import CoreLogger


DEFAULT_LOGGER_NAME = "mstair.beanpath"


def create_logger(name: str | None, *, level: int | str | None = None) -> CoreLogger:
    """
    Return the CoreLogger registered under `name`, creating it if needed.

    A plain logging.Logger already registered under the name is replaced, so
    that records keep flowing through CoreLogger's level and prefix handling.

    :param name: Logger name; empty or ``"__main__"`` maps to the package logger.
    :param level: Optional explicit level, overriding the environment.
    :return: CoreLogger instance.
    """
    logger_name = name if name and name != "__main__" else DEFAULT_LOGGER_NAME
    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        if isinstance(existing, logging.Logger):
            del logging.Logger.manager.loggerDict[logger_name]
        logger = _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create a CoreLogger through logging.getLogger().

    CoreLogger is installed as the logger class only for the duration of the
    call, so the new logger gets a proper parent and propagates to root.

    :raises TypeError: If getLogger() returns another logger class.
    """
    logging_class = logging.getLoggerClass()
    logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


# End of file: src/mstair/beanpath/xlogging/logger_factory.py
