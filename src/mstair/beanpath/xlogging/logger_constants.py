# File: src/mstair/beanpath/xlogging/logger_constants.py
"""
Custom log levels and record attribute names shared by the xlogging modules.
"""

import logging


K_KLASS_NAME = "klass_name"

CONSTRUCT = logging.INFO - 1  # (19) accessor construction events, hidden at INFO
TRACE = logging.DEBUG - 1  # (9) per-segment reads and writes, hidden at DEBUG

_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the custom level names with the logging module once."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {"TRACE": TRACE, "CONSTRUCT": CONSTRUCT}.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/beanpath/xlogging/logger_constants.py
