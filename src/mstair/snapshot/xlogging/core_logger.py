# File: src/mstair/snapshot/xlogging/core_logger.py
"""
Structured logging with environment-driven configuration.

Example:
    >>> from mstair.snapshot.xlogging import create_logger
    >>> LOG = create_logger(__name__)
    >>> with LOG.prefix_with("[export]"):
    ...     LOG.info("wrote %s", path)

Features:
- TRACE level below DEBUG
- Scoped message prefixes that are safe across threads
- Non-primitive format arguments rendered as Python expressions

Design:
- Only the root logger owns a handler; CoreLogger instances propagate to it.
- Per-logger levels come from LogLevelConfig (LOG_LEVEL family of environment variables).
- initialize_root() is the only supported entry point for root setup.
"""

from __future__ import annotations

import contextvars
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, TextIO

from mstair.snapshot.base.types import PRIMITIVE_TYPES
from mstair.snapshot.xlogging.logger_constants import TRACE, initialize_logger_constants
from mstair.snapshot.xlogging.logger_formatter import CoreFormatter
from mstair.snapshot.xlogging.logger_util import LogLevelConfig


__all__ = [
    "CoreLogger",
    "initialize_root",
]

_LOG_KWARGS_STANDARD: set[str] = {"exc_info", "stack_info", "stacklevel", "extra"}
_LOG_ROOT_ATTR_NAME = "_mstair_snapshot_corelogger_initialized"

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Logger with a TRACE level, scoped prefixes and expression-rendered arguments.

    Handlers are not attached directly; records propagate to the root logger,
    which holds a single stderr handler installed by initialize_root().
    """

    # Frames between the user's call and Logger.log(): the level method and _emit().
    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2

    def __init__(self, name: str, level: int | str = logging.NOTSET) -> None:
        """
        :param name: The name of the logger, typically the module name.
        :param level: The initial level; NOTSET resolves it from the environment.
        """
        initialize_logger_constants()
        if level in {logging.NOTSET, "NOTSET", ""}:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._emit(TRACE, msg, args, kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, msg, args, kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, msg, args, kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, msg, args, kwargs)

    def exception(self, msg: object, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.CRITICAL, msg, args, kwargs)

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        self._emit(level, msg, args, kwargs)

    def _emit(self, level: int, msg: object, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        """
        Apply the active prefix, render non-primitive arguments, then delegate to Logger.log().

        Unknown keyword arguments are moved into `extra` instead of raising TypeError.
        """
        initialize_root()
        if not self.isEnabledFor(level):
            return

        extra: dict[str, Any] = dict(kwargs.pop("extra", None) or {})
        for key in [k for k in kwargs if k not in _LOG_KWARGS_STANDARD]:
            extra[key] = kwargs.pop(key)

        prefix = _log_prefix.get()
        if prefix:
            msg = f"{prefix}{msg}"

        stacklevel: int = kwargs.pop("stacklevel", 1) + self._INTERNAL_FRAME_OFFSET
        super().log(
            level,
            msg,
            *_normalize_unsupported_args(args),
            stacklevel=stacklevel,
            extra=extra or None,
            **kwargs,
        )

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix every message logged in this context (any logger, current thread or task).

        Nested contexts accumulate: `outer > inner > message`.

        :param prefix: The prefix string to prepend to log messages.
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
    Idempotently give the root logger one stderr handler with a CoreFormatter.

    State is tracked as an attribute on the root logger, not in a module global.
    Handlers the host application installed on other streams are left alone.

    :param fmt: Format string. Defaults to LOG_FORMAT or the package default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT; ISO 8601 if neither is set.
    :param level: Root level (int or name). If None and root is NOTSET, WARNING is used.
    :param force: Reinitialize even if already initialized, replacing the stderr handler.
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
        for h in stderr_handlers:
            root.removeHandler(h)
        stderr_handlers = []

    formatter = CoreFormatter(
        fmt or os.environ.get("LOG_FORMAT"),
        datefmt if datefmt is not None else os.environ.get("LOG_DATEFMT"),
    )
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(formatter)

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _normalize_unsupported_args(args: tuple[Any, ...]) -> tuple[Any, ...]:
    """
    Replace non-primitive format arguments with their rendered Python expression.

    :param args: The `%`-style arguments passed to a log call.
    :return: Arguments safe to interpolate; values that cannot be rendered become a marker.
    """
    if all(isinstance(arg, PRIMITIVE_TYPES) for arg in args):
        return args

    from mstair.snapshot.render.errors import SnapshotError
    from mstair.snapshot.snapshot_api import render_value

    normalized: list[Any] = []
    for arg in args:
        if isinstance(arg, PRIMITIVE_TYPES):
            normalized.append(arg)
            continue
        try:
            normalized.append(render_value(arg).text)
        except SnapshotError as exc:
            normalized.append(f"<unrenderable {type(arg).__name__}: {exc}>")
    return tuple(normalized)


# End of file: src/mstair/snapshot/xlogging/core_logger.py
