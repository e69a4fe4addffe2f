# File: src/mstair/snapshot/xlogging/logger_util.py
"""
Environment variable-driven log level configuration.

Two sources are supported:
- Pattern-based DSL strings in LOG_LEVEL / LOG_LEVELS, e.g. `LOG_LEVEL="info;mstair.*=debug"`
- Per-logger overrides in variables like LOG_LEVEL_MSTAIR_SNAPSHOT_RENDER=TRACE

In a variable suffix, `_` separates dotted name parts and `__` stands for a literal underscore.
Precedence when resolving a logger name: exact > ancestor > best glob > default > fallback.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import ClassVar, Final, NamedTuple

from mstair.snapshot.base.fs_helpers import fs_load_dotenv
from mstair.snapshot.xlogging.logger_constants import initialize_logger_constants


__all__ = [
    "LogEnvVar",
    "LogLevelConfig",
]

_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")

_log_level_config_instance: LogLevelConfig | None = None


@dataclass(slots=True)
class LogEnvVar:
    """A log-level environment variable, with the logger name its suffix targets."""

    NAME_RX: ClassVar[re.Pattern[str]] = re.compile(
        r"^(?P<BASENAME>LOG_LEVELS?)(?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$"
    )

    name: str = field(default="", repr=False)
    module: str = ""
    value: str = field(default="", repr=False)

    @classmethod
    def from_env_var(cls, name: str, value: str) -> LogEnvVar | None:
        """Return a LogEnvVar if `name` is a log-level variable, else None."""
        match = cls.NAME_RX.match(name)
        if match is None:
            return None
        suffix = match["SUFFIX"].lstrip("_")
        if not suffix or suffix.upper() == "ROOT":
            module = ""
        else:
            module = suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()
        return cls(name=name, module=module, value=value)

    @classmethod
    def from_environ(cls) -> Iterator[LogEnvVar]:
        """Yield a LogEnvVar for every matching variable, after loading `.env`."""
        fs_load_dotenv()
        for name, value in sorted(os.environ.items(), reverse=True):
            if (env_var := cls.from_env_var(name, value)) is not None:
                yield env_var


class LogEnvPatternLevel(NamedTuple):
    """Mapping from a logger-name pattern to an integer log level."""

    pattern: str
    level: int


@dataclass(slots=True)
class LogLevelConfig:
    """Resolve per-logger levels from the LOG_LEVEL family of environment variables."""

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the process-wide LogLevelConfig, creating it on first use."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            initialize_logger_constants()
            _log_level_config_instance = LogLevelConfig()
        return _log_level_config_instance

    def update_from_environment(self) -> None:
        """Rebuild the pattern->level mapping from the current environment."""
        self.pattern_to_level.clear()
        for var in LogEnvVar.from_environ():
            for parsed in self.parse_log_var(var):
                self.pattern_to_level[parsed.pattern] = parsed.level

    def get_effective_level(self, logger_name: str, *, default: int = logging.WARNING) -> int:
        """Return the configured level for `logger_name`, or `default` if none applies."""
        name_lc = logger_name.lower()
        named: dict[str, int] = {k.lower(): v for k, v in self.pattern_to_level.items() if k}

        if name_lc in named:
            return named[name_lc]

        parts = name_lc.split(".")
        for end in range(len(parts) - 1, 0, -1):
            ancestor = ".".join(parts[:end])
            if ancestor in named:
                return named[ancestor]

        best_level: int | None = None
        best_score = -1
        for pattern, level in named.items():
            if not any(ch in pattern for ch in "*?[") or not fnmatch.fnmatch(name_lc, pattern):
                continue
            score = min((i for i, ch in enumerate(pattern) if ch in "*?["), default=len(pattern))
            if score > best_score:
                best_score, best_level = score, level
        if best_level is not None:
            return best_level

        return self.pattern_to_level.get("", default)

    @staticmethod
    def parse_log_var(var: LogEnvVar) -> Iterator[LogEnvPatternLevel]:
        """Parse one variable's value into pattern->level pairs, skipping unknown levels."""
        level_names = {
            k.upper(): v for k, v in logging.getLevelNamesMapping().items() if isinstance(v, int)
        }
        for fragment in _FRAGMENT_SEPARATOR_RX.split(var.value):
            fragment = fragment.strip()
            if not fragment:
                continue
            parts = _ASSIGNMENT_OPERATOR_RX.split(fragment, maxsplit=1)
            if len(parts) == 2:
                pattern, level_name = parts[0].strip("'\" "), parts[1].strip("'\" ")
            else:
                pattern, level_name = "", parts[0].strip("'\" ")

            if var.module:
                pattern = f"{var.module}.{pattern}" if pattern not in {"", "root"} else var.module
            if pattern.lower() == "root":
                pattern = ""

            level = int(level_name) if level_name.isdigit() else level_names.get(level_name.upper())
            if not level:
                continue
            yield LogEnvPatternLevel(pattern, level)


# End of file: src/mstair/snapshot/xlogging/logger_util.py
