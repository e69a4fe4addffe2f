# File: src/mstair/snapshot/test_snapshot_config.py
"""
Tests for SnapshotConfig: defaults, setters, snapshots, environment, and reset.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from mstair.snapshot import snapshot_config
from mstair.snapshot.render.model import FormatProfile, IndentStyle, RenderOptions
from mstair.snapshot.snapshot_config import ConfigSnapshot, SnapshotConfig, get_default_config


@pytest.mark.unit
def test_library_defaults() -> None:
    config = SnapshotConfig()
    assert config.get_root() is None
    assert config.get_header() is None
    assert config.get_format_profile() == FormatProfile()
    assert config.get_render_options() == RenderOptions()
    assert config.snapshot() == ConfigSnapshot()


@pytest.mark.unit
def test_setters_and_getters(tmp_path: Path) -> None:
    config = SnapshotConfig()
    config.set_root(str(tmp_path))
    config.set_header("Generated")
    config.set_format_profile(FormatProfile(indent_style=IndentStyle.TAB))
    config.set_render_options(RenderOptions(sort_map_keys=False))

    assert config.get_root() == tmp_path
    assert config.get_header() == "Generated"
    assert config.get_format_profile().indent_style is IndentStyle.TAB
    assert config.get_render_options().sort_map_keys is False

    config.set_root(None)
    assert config.get_root() is None


@pytest.mark.unit
def test_setters_validate_types() -> None:
    config = SnapshotConfig()
    with pytest.raises(TypeError):
        config.set_format_profile(RenderOptions())  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        config.set_render_options(FormatProfile())  # type: ignore[arg-type]


@pytest.mark.unit
def test_reset_to_defaults(tmp_path: Path) -> None:
    options = RenderOptions(max_depth=5)
    config = SnapshotConfig(root_path=tmp_path, header="h", render_options=options)
    config.reset_to_defaults()
    assert config.snapshot() == ConfigSnapshot()


@pytest.mark.unit
def test_snapshot_is_unaffected_by_later_changes() -> None:
    config = SnapshotConfig(header="before")
    snap = config.snapshot()
    config.set_header("after")
    assert snap.header == "before"
    assert config.snapshot().header == "after"


@pytest.mark.unit
def test_from_environ(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(snapshot_config, "fs_load_dotenv", lambda *a, **k: False)
    monkeypatch.setenv("MSTAIR_SNAPSHOT_ROOT", str(tmp_path))
    monkeypatch.setenv("MSTAIR_SNAPSHOT_HEADER", "From env")
    config = SnapshotConfig.from_environ()
    assert config.get_root() == tmp_path
    assert config.get_header() == "From env"

    monkeypatch.delenv("MSTAIR_SNAPSHOT_ROOT")
    monkeypatch.setenv("MSTAIR_SNAPSHOT_HEADER", "")
    config = SnapshotConfig.from_environ()
    assert config.get_root() is None
    assert config.get_header() is None


@pytest.mark.unit
def test_default_config_is_shared() -> None:
    assert get_default_config() is get_default_config()


@pytest.mark.unit
def test_concurrent_mutation_and_snapshots() -> None:
    config = SnapshotConfig()
    pairs = [("a", FormatProfile(indent_width=2)), ("b", FormatProfile(indent_width=8))]

    def mutate(i: int) -> None:
        header, profile = pairs[i % 2]
        config.set_header(header)
        config.set_format_profile(profile)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(mutate, range(200)))
        snaps = list(pool.map(lambda _: config.snapshot(), range(200)))
    for snap in snaps:
        assert snap.header in {"a", "b"}
        assert snap.format_profile.indent_width in {2, 8}


# End of file: src/mstair/snapshot/test_snapshot_config.py
