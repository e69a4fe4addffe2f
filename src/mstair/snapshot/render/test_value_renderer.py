# File: src/mstair/snapshot/render/test_value_renderer.py
"""
Tests for the dispatcher: collections, ordering, imports, annotations, custom
render functions, and concurrent determinism.
"""

from __future__ import annotations

import collections
import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import pytest

from mstair.snapshot.render.errors import ReflectionFailure, UnsupportedType
from mstair.snapshot.render.model import (
    Expression,
    FieldSegment,
    IndexSegment,
    KeySegment,
    RenderContext,
    RenderOptions,
)
from mstair.snapshot.render.renderer_registry import RendererRegistry
from mstair.snapshot.render.value_renderer import RenderResult, ValueRenderer


def _render(
    value: object, registry: RendererRegistry | None = None, **options: Any
) -> RenderResult:
    view = (registry or RendererRegistry()).snapshot()
    return ValueRenderer(options=RenderOptions(**options), registry=view).render(value)


@dataclass
class Celsius:
    degrees: float


@dataclass
class Reading:
    label: str
    temperature: Celsius


# ---------- Collections ----------


@pytest.mark.unit
def test_sequence_layout() -> None:
    assert _render([]).text == "[]"
    assert _render([1]).text == "[1]"
    assert _render([1, 2]).text == "[\n    1,\n    2,\n]"
    assert _render(()).text == "()"
    assert _render((1,)).text == "(1,)"
    assert _render((1, "a")).text == '(\n    1,\n    "a",\n)'


@pytest.mark.unit
def test_map_keys_sorted_by_rendered_text() -> None:
    assert _render({"b": 1, "a": 2}).text == '{\n    "a": 2,\n    "b": 1,\n}'
    assert _render({10: "x", 9: "y"}).text == '{\n    10: "x",\n    9: "y",\n}'
    mixed = _render({1: "int", "1": "str", None: "none"}).text
    assert mixed.splitlines()[1:4] == ['    "1": "str",', '    1: "int",', '    None: "none",']


@pytest.mark.unit
def test_map_insertion_order_when_unsorted() -> None:
    text = _render({"b": 1, "a": 2}, sort_map_keys=False).text
    assert text == '{\n    "b": 1,\n    "a": 2,\n}'


@pytest.mark.unit
def test_sets_sorted_by_rendered_text() -> None:
    assert _render(set()).text == "set()"
    assert _render(frozenset()).text == "frozenset()"
    assert _render({3}).text == "set([3])"
    assert _render({"b", "a", "c"}).text == 'set([\n    "a",\n    "b",\n    "c",\n])'
    assert _render(frozenset({2, 10})).text == "frozenset([\n    10,\n    2,\n])"


@pytest.mark.unit
def test_generic_collections() -> None:
    result = _render(collections.deque([1, 2]))
    assert result.text == "collections.deque([\n    1,\n    2,\n])"
    assert result.imports == ("import collections",)
    assert result.annotation == "collections.deque"

    ordered = _render(collections.OrderedDict([("b", 1), ("a", 2)])).text
    assert ordered == 'collections.OrderedDict({\n    "b": 1,\n    "a": 2,\n})'
    assert _render(collections.Counter("aa")).text == 'collections.Counter({"a": 2})'

    factory = _render(collections.defaultdict(list, {"k": [1]})).text
    assert factory == 'collections.defaultdict(list, {"k": [1]})'


@pytest.mark.unit
def test_defaultdict_with_custom_factory_is_unsupported() -> None:
    with pytest.raises(UnsupportedType):
        _render(collections.defaultdict(lambda: 0))


@pytest.mark.unit
def test_nested_failure_paths() -> None:
    with pytest.raises(UnsupportedType) as excinfo:
        _render({"outer": [1, {"inner": object}]})
    assert excinfo.value.path == (KeySegment('"outer"'), IndexSegment(1), KeySegment('"inner"'))

    with pytest.raises(UnsupportedType) as excinfo:
        _render({len: 1})
    assert excinfo.value.path == (IndexSegment(0),)


# ---------- Imports and annotations ----------


@pytest.mark.unit
def test_imports_are_collected_and_sorted() -> None:
    value = {"when": datetime.date(2024, 1, 1), "reading": Reading("a", Celsius(1.5))}
    result = _render(value)
    assert result.imports == (
        f"from {__name__} import Celsius",
        f"from {__name__} import Reading",
        "import datetime",
    )
    assert result.annotation == "dict"


@pytest.mark.unit
def test_annotations() -> None:
    assert _render(None).annotation == "None"
    assert _render(1).annotation == "int"
    assert _render(datetime.date(2024, 1, 1)).annotation == "datetime.date"
    assert _render(Celsius(1.0)).annotation == "Celsius"


@pytest.mark.unit
def test_local_class_uses_bare_name_and_warns(caplog: pytest.LogCaptureFixture) -> None:
    @dataclass
    class Local:
        x: int

    with caplog.at_level(logging.WARNING):
        result = _render([Local(1), Local(2)])
    assert "Local(x=1)" in result.text
    assert not any("Local" in stmt for stmt in result.imports)
    warnings = [r for r in caplog.records if "cannot be imported" in r.getMessage()]
    assert len(warnings) == 1


# ---------- Custom render functions ----------


@pytest.mark.unit
def test_custom_render_fn_with_children_and_imports() -> None:
    def render_reading(value: Reading, context: RenderContext) -> Expression:
        label = context.render_child(value.label, FieldSegment("label"), value)
        return Expression(f"make_reading({label})", ("from sensors import make_reading",))

    registry = RendererRegistry()
    registry.register(Reading, render_reading)
    result = _render(Reading("kitchen", Celsius(20.0)), registry)
    assert result.text == 'make_reading("kitchen")'
    assert result.imports == ("from sensors import make_reading",)


@pytest.mark.unit
def test_custom_render_fn_errors_are_wrapped_once() -> None:
    def broken(value: Celsius, context: RenderContext) -> str:
        raise KeyError("degrees")

    registry = RendererRegistry()
    registry.register(Celsius, broken)
    with pytest.raises(ReflectionFailure) as excinfo:
        _render(Reading("a", Celsius(1.0)), registry)
    assert excinfo.value.path == (FieldSegment("temperature"),)
    assert isinstance(excinfo.value.__cause__, KeyError)


@pytest.mark.unit
def test_custom_render_fn_snapshot_errors_propagate_unchanged() -> None:
    def refuse(value: Celsius, context: RenderContext) -> str:
        raise UnsupportedType("Celsius", context.path)

    registry = RendererRegistry()
    registry.register(Celsius, refuse)
    with pytest.raises(UnsupportedType) as excinfo:
        _render([Celsius(1.0)], registry)
    assert excinfo.value.path == (IndexSegment(0),)


@pytest.mark.unit
def test_custom_render_fn_must_return_text() -> None:
    registry = RendererRegistry()
    registry.register(Celsius, lambda value, context: 42)  # type: ignore[arg-type,return-value]
    with pytest.raises(ReflectionFailure, match="expected str"):
        _render(Celsius(1.0), registry)


@pytest.mark.unit
def test_render_detached_keeps_imports_out() -> None:
    renderer = ValueRenderer(registry=RendererRegistry().snapshot())
    text = renderer.render_detached(datetime.date(2024, 1, 1), RenderContext())
    assert text == "datetime.date(2024, 1, 1)"
    assert renderer.imports == set()


# ---------- Determinism ----------


@pytest.mark.unit
def test_repeated_and_concurrent_renders_are_identical() -> None:
    value = {
        "tags": {"z", "a", "m"},
        "readings": [Reading(str(i), Celsius(i / 3)) for i in range(5)],
        "when": datetime.datetime(2024, 1, 1, tzinfo=datetime.UTC),
        2: b"\x00" * 20,
    }
    expected = _render(value).text
    registry = RendererRegistry()
    with ThreadPoolExecutor(max_workers=50) as pool:
        results = list(pool.map(lambda _: _render(value, registry).text, range(50)))
    assert results == [expected] * 50


# End of file: src/mstair/snapshot/render/test_value_renderer.py
