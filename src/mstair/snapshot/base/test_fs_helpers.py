# File: src/mstair/snapshot/base/test_fs_helpers.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from mstair.snapshot.base import fs_helpers
from mstair.snapshot.base.fs_helpers import (
    fs_find_pyproject_toml,
    fs_load_dotenv,
    fs_write_text_atomic,
)


@pytest.mark.unit
def test_write_text_atomic_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "out.py"
    fs_write_text_atomic(target, "a = 1\r\n")
    assert target.read_bytes() == b"a = 1\r\n"
    fs_write_text_atomic(target, "b = 2\n")
    assert target.read_text(encoding="utf-8") == "b = 2\n"
    assert [p.name for p in tmp_path.iterdir()] == ["out.py"]


@pytest.mark.unit
def test_write_text_atomic_cleans_up_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def refuse(src: str, dst: Path) -> None:
        raise PermissionError("read-only")

    monkeypatch.setattr(fs_helpers.os, "replace", refuse)
    with pytest.raises(PermissionError):
        fs_write_text_atomic(tmp_path / "out.py", "x = 1\n")
    assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
def test_find_pyproject_toml(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert fs_find_pyproject_toml(start_dir=nested) == tmp_path / "pyproject.toml"


@pytest.mark.unit
def test_load_dotenv_from_explicit_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("MSTAIR_SNAPSHOT_TEST_VALUE=from-dotenv\n", encoding="utf-8")
    monkeypatch.delenv("MSTAIR_SNAPSHOT_TEST_VALUE", raising=False)
    assert fs_load_dotenv(dotenv_path=env_file) is True
    assert os.environ["MSTAIR_SNAPSHOT_TEST_VALUE"] == "from-dotenv"
    monkeypatch.delenv("MSTAIR_SNAPSHOT_TEST_VALUE")


@pytest.mark.unit
def test_load_dotenv_without_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(fs_helpers.dotenv, "find_dotenv", lambda **_: "")
    assert fs_load_dotenv() is False


# End of file: src/mstair/snapshot/base/test_fs_helpers.py
