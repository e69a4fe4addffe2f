# File: src/mstair/snapshot/render/test_model.py
"""
Tests for breadcrumbs, policy dataclasses, render contexts, and error messages.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from mstair.snapshot.render.errors import (
    FormattingFailure,
    IOFailure,
    OverwriteDisallowed,
    ReflectionFailure,
    SnapshotError,
    UnsupportedType,
)
from mstair.snapshot.render.model import (
    FieldSegment,
    FormatProfile,
    IndentStyle,
    IndexSegment,
    KeySegment,
    RenderContext,
    RenderOptions,
    format_path,
)


# ---------- Breadcrumbs ----------


@pytest.mark.unit
def test_segments_and_path_text() -> None:
    path = (FieldSegment("address"), FieldSegment("lines"), IndexSegment(2), KeySegment('"k"'))
    assert [str(s) for s in path] == ["address", "lines", "[2]", '["k"]']
    assert format_path(path) == 'address → lines → [2] → ["k"]'
    assert format_path(()) == ""


@pytest.mark.unit
def test_descend_copies_instead_of_mutating() -> None:
    root = RenderContext()
    owner = object()
    child = root.descend(FieldSegment("a"), owner)
    sibling = root.descend(FieldSegment("b"))

    assert root.path == () and root.depth == 0 and root.ancestors == ()
    assert child.path == (FieldSegment("a"),)
    assert child.depth == 1
    assert child.is_ancestor(owner)
    assert sibling.path == (FieldSegment("b"),)
    assert not sibling.is_ancestor(owner)


@pytest.mark.unit
def test_render_child_requires_dispatch() -> None:
    with pytest.raises(RuntimeError):
        RenderContext().render_child(1, IndexSegment(0))


# ---------- Policy ----------


@pytest.mark.unit
def test_render_options_defaults_and_validation() -> None:
    options = RenderOptions()
    assert options.sort_map_keys is True
    assert options.deterministic_set_order is True
    assert options.inline_binary_threshold == 16
    assert options.force_enum_shorthand is True
    assert options.max_depth == 256
    with pytest.raises(FrozenInstanceError):
        options.max_depth = 3  # type: ignore[misc]
    with pytest.raises(ValueError):
        RenderOptions(inline_binary_threshold=-1)
    with pytest.raises(ValueError):
        RenderOptions(max_depth=0)


@pytest.mark.unit
def test_format_profile_indent_unit() -> None:
    assert FormatProfile().indent_unit == "    "
    assert FormatProfile(indent_width=2).indent_unit == "  "
    assert FormatProfile(indent_style=IndentStyle.TAB, indent_width=8).indent_unit == "\t"
    with pytest.raises(ValueError):
        FormatProfile(indent_width=0)


# ---------- Errors ----------


@pytest.mark.unit
def test_error_messages() -> None:
    path = (FieldSegment("address"), FieldSegment("zip_code"))
    err = UnsupportedType("Foo", path)
    assert str(err) == "Unsupported type: Foo at path: address → zip_code"
    assert err.path == path and err.type_name == "Foo"

    assert str(UnsupportedType("Foo")) == "Unsupported type: Foo"
    failure = ReflectionFailure("boom", (IndexSegment(1),))
    assert str(failure) == "Reflection error: boom at path: [1]"
    assert str(FormattingFailure("bad")) == "Formatting error: bad"
    assert str(IOFailure("disk full")) == "I/O error: disk full"

    overwrite = OverwriteDisallowed(Path("out/x.py"))
    assert overwrite.file_path == Path("out/x.py")
    assert str(overwrite).startswith("Overwrite disallowed for file: ")

    for error_type in (UnsupportedType, ReflectionFailure, FormattingFailure, IOFailure):
        assert issubclass(error_type, SnapshotError)


# End of file: src/mstair/snapshot/render/test_model.py
