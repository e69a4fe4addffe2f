# File: src/mstair/snapshot/render/reflection.py
"""
Structural fallback for values with no registered renderer, metadata, or collection handler.

The first strategy that applies wins:

1. `enum.Enum` members: `Color.RED`, or `Color(<raw>)` when shorthand is off and the
   value is a scalar; `enum.Flag` combinations are always `Perm(<raw int>)`.
2. Subclasses of `int`, `float`, `complex`, `str`, `bytes`: `Name(<base literal>)`.
3. Named tuples: `Point(x=1, y=2)` from `_fields`.
4. Dataclasses: `init=True` fields in declaration order.
5. attrs classes: `init=True` attributes from `__attrs_attrs__`, by their init alias.
6. Objects with instance state: `__dict__` entries in insertion order, then set
   `__slots__` members, base classes first.
7. Objects exposing `__getnewargs__()`: positional `Name(arg0, arg1)`.

Member order and labels come from the class definition. Types whose constructor
does not mirror their stored state should register a renderer or use
`@snapshot_exportable` instead.
"""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Final

from mstair.snapshot.base.types import MISSING, OPAQUE_RUNTIME_TYPES, qualified_type_name
from mstair.snapshot.render.canonical import layout_block
from mstair.snapshot.render.errors import ReflectionFailure, UnsupportedType
from mstair.snapshot.render.model import FieldSegment, IndexSegment, RenderContext
from mstair.snapshot.xlogging import create_logger


if TYPE_CHECKING:
    from mstair.snapshot.render.value_renderer import ValueRenderer


__all__ = [
    "iter_members",
    "render_enum",
    "render_structure",
]

LOG = create_logger(__name__)

_RAW_ENUM_VALUE_TYPES: Final[tuple[type, ...]] = (int, str, float, bool, bytes)
_SCALAR_BASE_VALUE: Final[dict[type, Any]] = {
    int: int.__int__,
    float: float.__float__,
    complex: complex.__complex__,
    str: str.__str__,
    bytes: bytes.__bytes__,
}
_SKIPPED_SLOTS: Final[frozenset[str]] = frozenset({"__dict__", "__weakref__"})


def render_structure(value: object, context: RenderContext, renderer: ValueRenderer) -> str:
    """
    Render `value` by structural introspection.

    :raises UnsupportedType: For runtime handles (functions, classes, modules, files, locks...)
        and objects with no introspectable state.
    """
    typ = type(value)
    if isinstance(value, OPAQUE_RUNTIME_TYPES):
        raise UnsupportedType(qualified_type_name(typ), context.path)

    if isinstance(value, enum.Enum):
        return render_enum(value, context, renderer)

    base = next((b for b in _SCALAR_BASE_VALUE if isinstance(value, b)), None)
    if base is not None:
        plain = _SCALAR_BASE_VALUE[base](value)
        inner = renderer.dispatch(plain, context.descend(IndexSegment(0)))
        return f"{renderer.type_reference(typ, path=context.path)}({inner})"

    members = list(iter_members(value))
    if not members and not _has_introspectable_state(value):
        raise UnsupportedType(qualified_type_name(typ), context.path)

    callee = renderer.type_reference(typ, path=context.path)
    items: list[str] = []
    for label, member in members:
        segment = FieldSegment(label) if isinstance(label, str) else IndexSegment(label)
        child = context.descend(segment, value)
        if member is MISSING:
            raise ReflectionFailure(f"{typ.__qualname__} has no attribute {label!r}", child.path)
        text = renderer.dispatch(member, child)
        items.append(f"{label}={text}" if isinstance(label, str) else text)
    return layout_block(f"{callee}(", items, ")")


def render_enum(value: enum.Enum, context: RenderContext, renderer: ValueRenderer) -> str:
    typ = type(value)
    callee = renderer.type_reference(typ, path=context.path)
    name = value._name_
    is_named_member = name is not None and typ.__members__.get(name) is value
    raw = value._value_

    if not is_named_member:
        if isinstance(value, enum.Flag):
            return f"{callee}({renderer.dispatch(int(raw), context.descend(IndexSegment(0)))})"
        raise UnsupportedType(qualified_type_name(typ), context.path)

    shorthand = context.options.force_enum_shorthand or not isinstance(raw, _RAW_ENUM_VALUE_TYPES)
    if shorthand:
        return f"{callee}.{name}"
    return f"{callee}({renderer.dispatch(raw, context.descend(IndexSegment(0)))})"


def iter_members(value: object) -> Iterator[tuple[str | int, Any]]:
    """
    Yield `(label, member)` pairs for `value`'s stored state.

    Labels are attribute names, or positions for the `__getnewargs__` fallback.
    A declared field that is not set on the instance yields `MISSING`.
    """
    typ = type(value)

    if isinstance(value, tuple) and hasattr(typ, "_fields"):
        yield from zip(typ._fields, value, strict=True)
        return

    if dataclasses.is_dataclass(value):
        fields = [f for f in dataclasses.fields(value) if f.init]
        LOG.debug("%s: dataclass fields %s", typ.__qualname__, [f.name for f in fields])
        for f in fields:
            yield f.name, getattr(value, f.name, MISSING)
        return

    attrs_attrs = getattr(typ, "__attrs_attrs__", None)
    if attrs_attrs is not None:
        for a in attrs_attrs:
            if getattr(a, "init", True):
                label = getattr(a, "alias", None) or a.name.lstrip("_")
                yield label, getattr(value, a.name, MISSING)
        return

    state = _instance_state(value)
    if state:
        LOG.debug("%s: instance attributes %s", typ.__qualname__, list(state))
        yield from state.items()
        return

    getnewargs = getattr(value, "__getnewargs__", None)
    if callable(getnewargs):
        yield from enumerate(getnewargs())


def _instance_state(value: object) -> dict[str, Any]:
    state: dict[str, Any] = dict(getattr(value, "__dict__", None) or {})
    for klass in reversed(type(value).__mro__):
        slots = vars(klass).get("__slots__", ())
        for slot in (slots,) if isinstance(slots, str) else slots:
            if slot in _SKIPPED_SLOTS or slot in state:
                continue
            if (member := getattr(value, _mangle(klass, slot), MISSING)) is not MISSING:
                state[slot] = member
    return state


def _has_introspectable_state(value: object) -> bool:
    """True for plain Python objects whose state is simply empty, e.g. `Marker()`."""
    if hasattr(value, "__dict__"):
        return True
    return any("__slots__" in vars(k) for k in type(value).__mro__[:-1])


def _mangle(klass: type, name: str) -> str:
    if name.startswith("__") and not name.endswith("__"):
        return f"_{klass.__name__.lstrip('_')}{name}"
    return name


# End of file: src/mstair/snapshot/render/reflection.py
