# File: src/mstair/snapshot/xlogging/logger_formatter.py
"""
Record formatting for CoreLogger: project-relative file locations, colored level names,
and timestamps in a configurable time zone.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Any, Literal

import pytz
from colorama import Fore

from mstair.snapshot.base import config as cfg
from mstair.snapshot.base.constants import K_LOG_TZ
from mstair.snapshot.base.fs_helpers import fs_find_pyproject_toml
from mstair.snapshot.xlogging.logger_constants import K_COLOR


__all__ = [
    "DEFAULT_LOG_FORMAT",
    "CoreFormatter",
    "get_color_code",
    "rgb_code",
]

FormatStyle = Literal["%", "{", "$"]

DEFAULT_LOG_FORMAT = r"%(levelName)s %(asctime)s %(fileAndLine)s %(method)s %(message)s"


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to an ANSI escape code for 24-bit terminal color.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


RGB_CALLER = rgb_code(4 << 4, 8 << 4, 10 << 4)
COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": RGB_CALLER,
    "method": RGB_CALLER,
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(96, 96, 96),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: str | None = None) -> str:
    """
    Return the escape code for `key`, or "" when output is not an interactive display.

    `key` may be a COLOR_MAP entry, a `#rrggbb` hex color, or a colorama `Fore` name
    such as `"red"` or `"light_blue"`. Unknown keys reset the color.
    """
    if not cfg.in_desktop_mode():
        return ""
    if not key or key == "RESET":
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if key.startswith("#") and len(key) == 7:
        return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])

    clean_key = key.upper().replace("BRIGHT", "LIGHT")
    if "LIGHT" in clean_key and not clean_key.endswith("_EX"):
        clean_key += "_EX"
    return getattr(Fore, clean_key, Fore.RESET)


class CoreFormatter(logging.Formatter):
    """
    Formatter that adds `fileAndLine`, `method` and `levelName` record fields,
    colors them for interactive terminals, and renders `asctime` in the `LOG_TZ` zone.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        tz_name: str | None = None,
    ) -> None:
        """
        :param fmt: Format string, defaults to DEFAULT_LOG_FORMAT.
        :param datefmt: strftime format for timestamps; ISO 8601 when None.
        :param tz_name: pytz zone name; defaults to the LOG_TZ environment variable, then UTC.
        """
        super().__init__(
            fmt=fmt or DEFAULT_LOG_FORMAT, datefmt=datefmt, style=style, validate=validate
        )
        tz_name = tz_name or os.environ.get(K_LOG_TZ) or "UTC"
        try:
            self.tz = pytz.timezone(tz_name)
        except pytz.UnknownTimeZoneError:
            print(f"Unknown {K_LOG_TZ} time zone {tz_name!r}, using UTC", file=sys.stderr)
            self.tz = pytz.utc

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.method = get_color_code("method") + record.funcName + "()" + get_color_code()
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()

        message = super().format(record)
        color_key = getattr(record, K_COLOR, record.levelname)
        return get_color_code(color_key) + message + get_color_code()

    @staticmethod
    def format_file(file: str) -> str:
        """Return `file` relative to its project root (the nearest pyproject.toml), posix style."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        pyproject = fs_find_pyproject_toml(start_dir=path.parent)
        if pyproject is not None:
            try:
                return path.relative_to(pyproject.parent).as_posix()
            except ValueError:
                pass
        return path.absolute().as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        file_and_line = f"{self.format_file(file)}:{lineno}"
        return get_color_code("fileAndLine") + file_and_line + get_color_code()

    def formatException(
        self,
        ei: (
            tuple[type[BaseException], BaseException, TracebackType | None]
            | tuple[None, None, None]
            | BaseException
            | bool
            | None
        ),
    ) -> str:
        """Accept an exception instance or a bool as well as the stdlib 3-tuple."""
        if ei is True:
            ei = sys.exc_info()
        elif ei is False or ei is None:
            ei = (None, None, None)
        elif isinstance(ei, BaseException):
            ei = (type(ei), ei, ei.__traceback__)
        return super().formatException(ei)  # type: ignore[arg-type]

    def formatTime(self, record: Any, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, self.tz)
        text = stamp.strftime(re.sub(r"%-", "%", datefmt)) if datefmt else stamp.isoformat()
        return get_color_code(record.levelname) + text + get_color_code()


# End of file: src/mstair/snapshot/xlogging/logger_formatter.py
