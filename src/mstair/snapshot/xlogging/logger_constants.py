# File: src/mstair/snapshot/xlogging/logger_constants.py

from __future__ import annotations

import logging
from typing import Final


__all__ = [
    "K_COLOR",
    "SUPPRESS",
    "TRACE",
    "initialize_logger_constants",
]

K_COLOR: Final[str] = "color"

TRACE: Final[int] = logging.DEBUG - 1  # (9) LOG.trace() will not output at DEBUG level
SUPPRESS: Final[int] = -1  # never shown, for internal use only

_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the custom level names with `logging` if not already registered."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    for key, value in {"TRACE": TRACE, "SUPPRESS": SUPPRESS}.items():
        if key not in logging.getLevelNamesMapping():
            logging.addLevelName(value, key)


# End of file: src/mstair/snapshot/xlogging/logger_constants.py
