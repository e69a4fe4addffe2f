# File: src/mstair/snapshot/base/fs_helpers.py
"""
Filesystem helpers shared by the logging layer and the snapshot exporter.
"""

from __future__ import annotations

import logging
import os
import tempfile
import warnings
from pathlib import Path
from typing import IO

import dotenv

from mstair.snapshot.base.types import StrPath


__all__ = [
    "fs_find_pyproject_toml",
    "fs_load_dotenv",
    "fs_write_text_atomic",
]

_fs_pyproject_toml_cache: dict[Path, Path | None] = {}


def fs_find_pyproject_toml(
    *,
    start_dir: Path | None = None,
    strict: bool = False,
    warn: bool = False,
) -> Path | None:
    """
    Return the absolute path of the nearest `pyproject.toml` file.

    :param start_dir: The directory to start searching from, default is the current
        working directory.
    :param strict: If True, raises `FileNotFoundError` if the file is not found, default is False.
    :param warn: If True, emits a `UserWarning` if the file is not found, default is False.
    :return: The absolute path of the nearest `pyproject.toml` file.
    :raises FileNotFoundError: If the file is not found and `strict` is True.
    """
    start_dir = start_dir or Path.cwd()
    if start_dir not in _fs_pyproject_toml_cache:
        for dir in [start_dir, *list(start_dir.parents)]:
            if not dir.is_dir():
                continue
            candidate = dir / "pyproject.toml"
            if candidate.is_file():
                _fs_pyproject_toml_cache[start_dir] = candidate
                return candidate

        if strict:
            raise FileNotFoundError(f"No pyproject.toml found for {start_dir}")
        if warn:
            warnings.warn(
                message=f"No pyproject.toml found for {start_dir}.",
                category=UserWarning,
                stacklevel=2,
            )
        _fs_pyproject_toml_cache[start_dir] = None
    return _fs_pyproject_toml_cache[start_dir]


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
) -> bool:
    """
    Parse a .env file and load the variables it defines into `os.environ`.

    :param logger: Logger to receive python-dotenv diagnostics; implies verbose.
    :param dotenv_path: Absolute or relative path to .env file.
    :param stream: Text stream with .env content, used if `dotenv_path` is `None`.
    :param verbose: Whether to warn when the .env file is missing.
    :param override: Whether values from the .env file replace existing variables.
    :return: True if at least one environment variable is set else False

    If both `dotenv_path` and `stream` are `None`, `find_dotenv(usecwd=True)` locates
    the file starting from the current working directory.
    """
    if logger is not None:
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True) or None
        if dotenv_path is None:
            return False
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
        encoding="utf-8",
    )


def fs_write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """
    Write `text` to `path` so that readers never observe a partially written file.

    The content is written to a temporary file in the destination directory and then
    moved over the target with `os.replace()`. Newlines are written verbatim.

    :param path: Destination file; its parent directory must exist.
    :param text: Full file content.
    :raises OSError: If the temporary file cannot be created, written, or moved.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fp:
            fp.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


# End of file: src/mstair/snapshot/base/fs_helpers.py
