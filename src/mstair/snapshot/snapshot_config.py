# File: src/mstair/snapshot/snapshot_config.py
"""
Process-wide snapshot settings: output root, header, format profile, render options.

`SnapshotConfig` is a service object; each instance guards its settings with one
lock that is held for a single get or set only. A render call reads everything it
needs once through `snapshot()` and never consults the live object again, so a
setting changed by another thread mid-render does not affect that render.

`get_default_config()` returns the instance used when callers pass no `config=`.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path

from mstair.snapshot.base.constants import K_SNAPSHOT_HEADER, K_SNAPSHOT_ROOT
from mstair.snapshot.base.fs_helpers import fs_load_dotenv
from mstair.snapshot.base.types import StrPath
from mstair.snapshot.render.model import FormatProfile, RenderOptions
from mstair.snapshot.xlogging import create_logger


__all__ = [
    "ConfigSnapshot",
    "SnapshotConfig",
    "get_default_config",
]

LOG = create_logger(__name__)

_default_config: SnapshotConfig | None = None
_default_config_lock = threading.Lock()


@dataclass(frozen=True, slots=True)
class ConfigSnapshot:
    """Immutable copy of every setting, taken once at the start of a render call."""

    root_path: Path | None = None
    header: str | None = None
    format_profile: FormatProfile = field(default_factory=FormatProfile)
    render_options: RenderOptions = field(default_factory=RenderOptions)


class SnapshotConfig:
    """Mutable, thread-safe holder of the snapshot settings."""

    def __init__(
        self,
        *,
        root_path: StrPath | None = None,
        header: str | None = None,
        format_profile: FormatProfile | None = None,
        render_options: RenderOptions | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._root_path: Path | None = _as_path(root_path)
        self._header: str | None = header
        self._format_profile = format_profile or self.library_default_format_profile()
        self._render_options = render_options or self.library_default_render_options()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.snapshot()!r}>"

    @classmethod
    def from_environ(cls, *, load_dotenv: bool = True) -> SnapshotConfig:
        """
        Build a config from `MSTAIR_SNAPSHOT_ROOT` and `MSTAIR_SNAPSHOT_HEADER`.

        :param load_dotenv: Load a `.env` file into `os.environ` first.
        """
        if load_dotenv:
            fs_load_dotenv()
        root = os.environ.get(K_SNAPSHOT_ROOT) or None
        header = os.environ.get(K_SNAPSHOT_HEADER) or None
        return cls(root_path=root, header=header)

    @staticmethod
    def library_default_render_options() -> RenderOptions:
        return RenderOptions()

    @staticmethod
    def library_default_format_profile() -> FormatProfile:
        return FormatProfile()

    # ---------- Root path ----------

    def set_root(self, path: StrPath | None) -> None:
        """Set the directory exports are written to, or None to use the fallbacks."""
        resolved = _as_path(path)
        with self._lock:
            self._root_path = resolved
        LOG.debug("snapshot root set to %s", str(resolved) if resolved else None)

    def get_root(self) -> Path | None:
        with self._lock:
            return self._root_path

    # ---------- Header ----------

    def set_header(self, text: str | None) -> None:
        """Set the comment header placed at the top of every generated file."""
        with self._lock:
            self._header = text

    def get_header(self) -> str | None:
        with self._lock:
            return self._header

    # ---------- Format profile ----------

    def set_format_profile(self, profile: FormatProfile) -> None:
        if not isinstance(profile, FormatProfile):
            raise TypeError(f"expected FormatProfile, got {type(profile).__name__}")
        with self._lock:
            self._format_profile = profile

    def get_format_profile(self) -> FormatProfile:
        with self._lock:
            return self._format_profile

    # ---------- Render options ----------

    def set_render_options(self, options: RenderOptions) -> None:
        if not isinstance(options, RenderOptions):
            raise TypeError(f"expected RenderOptions, got {type(options).__name__}")
        with self._lock:
            self._render_options = options

    def get_render_options(self) -> RenderOptions:
        with self._lock:
            return self._render_options

    # ---------- Whole-config operations ----------

    def reset_to_defaults(self) -> None:
        """Restore the library defaults; tests call this to isolate from each other."""
        with self._lock:
            self._root_path = None
            self._header = None
            self._format_profile = self.library_default_format_profile()
            self._render_options = self.library_default_render_options()
        LOG.debug("snapshot configuration reset to defaults")

    def snapshot(self) -> ConfigSnapshot:
        """Return all settings as one consistent, immutable value."""
        with self._lock:
            return ConfigSnapshot(
                root_path=self._root_path,
                header=self._header,
                format_profile=self._format_profile,
                render_options=self._render_options,
            )


def get_default_config() -> SnapshotConfig:
    """Return the process-wide configuration, created with library defaults on first use."""
    global _default_config
    if _default_config is None:
        with _default_config_lock:
            if _default_config is None:
                _default_config = SnapshotConfig()
    return _default_config


def _as_path(path: StrPath | None) -> Path | None:
    return None if path is None else Path(path)


# End of file: src/mstair/snapshot/snapshot_config.py
