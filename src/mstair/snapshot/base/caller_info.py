# File: src/mstair/snapshot/base/caller_info.py
"""
Call-stack introspection used by logger naming and snapshot output placement.
"""

from __future__ import annotations

import inspect
from pathlib import Path
from types import FrameType


__all__ = [
    "caller_module_name_and_level",
    "caller_source_file",
]


def caller_module_name_and_level(
    *, stacklevel: int = 1, skip_module_frames: bool = True
) -> tuple[str, int]:
    """
    Resolve the name of the calling module and return it along with its actual stacklevel.

    :param stacklevel: Number of meaningful (non-<module>) frames to skip.
    :param skip_module_frames: Skip top-level frames like `<module>`. Default is True.
    :return tuple[str, int]: (module name or "", number of frames walked from this call)
    """
    if stacklevel < 1:
        raise ValueError("stacklevel must be greater than 0")

    frame: FrameType | None = inspect.currentframe()
    resolved_level = 0
    resolved_name = ""
    try:
        for _ in range(stacklevel):
            while skip_module_frames and frame and frame.f_code.co_name == "<module>":
                frame = frame.f_back
                resolved_level += 1
            if not frame:
                break
            frame = frame.f_back
            resolved_level += 1

        if frame:
            module = inspect.getmodule(frame)
            if module and module.__name__:
                resolved_name = module.__name__
        return resolved_name, resolved_level
    finally:
        # frame -> f_locals -> frame
        del frame


def caller_source_file(*, skip_prefixes: tuple[str, ...] = ("mstair.snapshot",)) -> Path | None:
    """
    Return the source file of the nearest frame outside the given module prefixes.

    Frames whose module name starts with any of `skip_prefixes` are skipped, except
    test modules, which count as callers. Frames without a real file (REPL, `exec`)
    are skipped as well.

    :param skip_prefixes: Dotted module-name prefixes that identify library frames.
    :return: Absolute path of the caller's source file, or None if none is found.
    """
    frame: FrameType | None = inspect.currentframe()
    try:
        while frame is not None:
            module_name: str = frame.f_globals.get("__name__", "") or ""
            filename = frame.f_code.co_filename
            is_library = any(
                module_name == p or module_name.startswith(p + ".") for p in skip_prefixes
            )
            is_test = module_name.rpartition(".")[2].startswith("test_")
            if (not is_library or is_test) and not filename.startswith("<"):
                return Path(filename).absolute()
            frame = frame.f_back
        return None
    finally:
        del frame


# End of file: src/mstair/snapshot/base/caller_info.py
