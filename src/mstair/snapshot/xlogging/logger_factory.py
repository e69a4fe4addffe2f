# File: src/mstair/snapshot/xlogging/logger_factory.py
"""
Logger factory for creating CoreLogger instances with names inferred from the caller.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from mstair.snapshot.base.caller_info import caller_module_name_and_level
from mstair.snapshot.xlogging.core_logger import CoreLogger


__all__ = [
    "create_logger",
    "get_caller_logger_name",
]


def create_logger(
    name: str | None = None,
    *,
    level: int | str | None = None,
    stacklevel: int = 1,
) -> CoreLogger:
    """
    Return a CoreLogger with a consistent, context-aware name.

    - `"__main__"` becomes the stem of the running script.
    - An empty name is derived from the calling module.
    - An existing CoreLogger of the same name is reused.

    :param name: Logger name, usually `__name__`.
    :param level: Explicit level; overrides the environment-derived level.
    :param stacklevel: Frames to skip when deriving the name from the caller.
    """
    logger_name: str = name or ""
    if logger_name == "__main__":
        arg0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
        logger_name = arg0.stem if arg0 and arg0.exists() else "embedded_main"
    if not logger_name:
        logger_name = get_caller_logger_name(stacklevel=stacklevel + 1)

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        logger = _get_core_logger_from_logging(logger_name)
    if level is not None:
        logger.setLevel(level)
    return logger


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create or retrieve a CoreLogger through logging.getLogger().

    The logger class is swapped only for this call so the new logger joins the
    standard hierarchy (parent links and propagation, which caplog relies on).

    :raises TypeError: If a plain Logger of the same name already exists.
    """
    logging_class = logging.getLoggerClass()
    if logging_class is not CoreLogger:
        logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        if logging_class is not CoreLogger:
            logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


def get_caller_logger_name(*, stacklevel: int = 1) -> str:
    """Resolve the default logger name based on caller context."""
    name = caller_module_name_and_level(stacklevel=stacklevel + 1)[0]
    if not name or name == "__main__":
        executable = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
        name = Path(executable).stem
    return name


# End of file: src/mstair/snapshot/xlogging/logger_factory.py
