# File: src/mstair/snapshot/render/errors.py
"""
Exceptions raised while rendering, formatting, or exporting a snapshot.

Every error is raised once, where the failure happens, and carries the breadcrumb
path of the node being rendered at that moment. Callers catch `SnapshotError` to
handle all of them.
"""

from __future__ import annotations

from pathlib import Path

from mstair.snapshot.render.model import RenderPath, format_path


__all__ = [
    "FormattingFailure",
    "IOFailure",
    "OverwriteDisallowed",
    "ReflectionFailure",
    "SnapshotError",
    "UnsupportedType",
]


def _at_path(path: RenderPath) -> str:
    return f" at path: {format_path(path)}" if path else ""


class SnapshotError(Exception):
    """Base class for all snapshot rendering and export errors."""

    path: RenderPath = ()


class UnsupportedType(SnapshotError):
    """No renderer, built-in handler, or structural fallback can express the value."""

    def __init__(self, type_name: str, path: RenderPath = ()) -> None:
        self.type_name = type_name
        self.path = tuple(path)
        super().__init__(f"Unsupported type: {type_name}{_at_path(self.path)}")


class ReflectionFailure(SnapshotError):
    """A render failed for a reason other than an unsupported type, e.g. a reference cycle."""

    def __init__(self, reason: str, path: RenderPath = ()) -> None:
        self.reason = reason
        self.path = tuple(path)
        super().__init__(f"Reflection error: {reason}{_at_path(self.path)}")


class FormattingFailure(SnapshotError):
    """The code formatter could not lay out the assembled text."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Formatting error: {reason}")


class IOFailure(SnapshotError):
    """Creating the output directory or writing the snapshot file failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"I/O error: {reason}")


class OverwriteDisallowed(SnapshotError):
    """The target file exists and the caller did not allow overwriting it."""

    def __init__(self, path: Path) -> None:
        self.file_path = path
        super().__init__(f"Overwrite disallowed for file: {path}")


# End of file: src/mstair/snapshot/render/errors.py
