# File: src/mstair/snapshot/render/model.py
"""
Immutable value types shared by the rendering pipeline.

- Breadcrumb segments (`FieldSegment`, `IndexSegment`, `KeySegment`) and `RenderPath`.
- `RenderOptions` and `FormatProfile`, the two policy snapshots.
- `RendererEntry`, one registry slot.
- `RenderContext`, the per-call state passed down the recursion by value.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Final

from mstair.snapshot.base.constants import DEFAULT_INDENT, PATH_SEPARATOR


__all__ = [
    "EMPTY_REGISTRY",
    "Expression",
    "FieldSegment",
    "FormatProfile",
    "IndentStyle",
    "IndexSegment",
    "KeySegment",
    "LineEnding",
    "PathSegment",
    "RenderContext",
    "RenderFn",
    "RenderOptions",
    "RenderPath",
    "RendererEntry",
    "format_path",
]


# ---------- Breadcrumbs ----------


@dataclass(frozen=True, slots=True)
class FieldSegment:
    """A labeled member, e.g. a dataclass field or attribute."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class IndexSegment:
    """A position in a sequence, set, or positional constructor."""

    position: int

    def __str__(self) -> str:
        return f"[{self.position}]"


@dataclass(frozen=True, slots=True)
class KeySegment:
    """A mapping value, identified by the rendered text of its key."""

    rendered_key: str

    def __str__(self) -> str:
        return f"[{self.rendered_key}]"


type PathSegment = FieldSegment | IndexSegment | KeySegment
type RenderPath = tuple[PathSegment, ...]


def format_path(path: RenderPath) -> str:
    """
    Join a breadcrumb path for humans, one `str(segment)` per segment.

    Fields read as their name, indexes as `[2]` and keys as `["k"]`, so a value inside
    `address.lines[2]["k"]` reads `address → lines → [2] → ["k"]`.
    """
    return PATH_SEPARATOR.join(str(segment) for segment in path)


# ---------- Policy ----------


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """
    Ordering and encoding policy consulted while rendering.

    :param sort_map_keys: Order mapping entries by their rendered key text.
    :param deterministic_set_order: Order set elements by their rendered text.
    :param inline_binary_threshold: Longest `bytes` value emitted as an inline literal.
    :param force_enum_shorthand: Emit `Color.RED` even when the member has a raw scalar value.
    :param max_depth: Deepest nesting level rendered before failing.
    """

    sort_map_keys: bool = True
    deterministic_set_order: bool = True
    inline_binary_threshold: int = 16
    force_enum_shorthand: bool = True
    max_depth: int = 256

    def __post_init__(self) -> None:
        if self.inline_binary_threshold < 0:
            raise ValueError(
                f"inline_binary_threshold must be >= 0: {self.inline_binary_threshold}"
            )
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1: {self.max_depth}")


class IndentStyle(enum.Enum):
    SPACE = "space"
    TAB = "tab"


class LineEnding(enum.Enum):
    LF = "\n"
    CRLF = "\r\n"


@dataclass(frozen=True, slots=True)
class FormatProfile:
    """Layout policy applied by the code formatter to assembled source text."""

    indent_style: IndentStyle = IndentStyle.SPACE
    indent_width: int = DEFAULT_INDENT
    line_ending: LineEnding = LineEnding.LF
    insert_final_newline: bool = True
    trim_trailing_whitespace: bool = True

    def __post_init__(self) -> None:
        if self.indent_width < 1:
            raise ValueError(f"indent_width must be >= 1: {self.indent_width}")

    @property
    def indent_unit(self) -> str:
        """The text of one indentation level."""
        return "\t" if self.indent_style is IndentStyle.TAB else " " * self.indent_width


# ---------- Registry entries ----------


@dataclass(frozen=True, slots=True)
class Expression:
    """
    Expression text together with the import statements it relies on.

    Render functions may return a plain `str` when the text needs no imports.
    """

    text: str
    imports: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.text


type RenderFn = Callable[[Any, RenderContext], str | Expression]
type DispatchFn = Callable[[object, RenderContext], str]


@dataclass(frozen=True, slots=True)
class RendererEntry:
    """
    A render function bound to the exact type it handles.

    :param type_key: The concrete type; subclasses do not match.
    :param render_fn: `render_fn(value, context) -> expression text`.
    :param imports: Import statements the emitted text relies on, e.g. `"import uuid"`.
    """

    type_key: type
    render_fn: RenderFn
    imports: tuple[str, ...] = ()


EMPTY_REGISTRY: Final[Mapping[type, RendererEntry]] = MappingProxyType({})


# ---------- Per-call context ----------


@dataclass(frozen=True, slots=True)
class RenderContext:
    """
    Per-call render state; never mutated, each descent step builds a new one.

    :param path: Breadcrumbs from the root value to the current node.
    :param options: The render options captured when the call started.
    :param registry: Read-only view of the registry captured when the call started.
    :param ancestors: `id()` of every container/object on the current descent, for cycle checks.
    :param depth: Current nesting level; the root value is at depth 0.
    :param dispatch: The active renderer's entry point, used by `render_child()`.
    """

    path: RenderPath = ()
    options: RenderOptions = field(default_factory=RenderOptions)
    registry: Mapping[type, RendererEntry] = EMPTY_REGISTRY
    ancestors: tuple[int, ...] = ()
    depth: int = 0
    dispatch: DispatchFn | None = field(default=None, repr=False, compare=False)

    def descend(self, segment: PathSegment, value: object | None = None) -> RenderContext:
        """
        Return the context for a child node, extending the path by `segment`.

        :param value: The container the child belongs to; its identity joins `ancestors`.
        """
        ancestors = self.ancestors if value is None else (*self.ancestors, id(value))
        return replace(self, path=(*self.path, segment), ancestors=ancestors, depth=self.depth + 1)

    def is_ancestor(self, value: object) -> bool:
        """True when `value` is already being rendered further up this branch."""
        return id(value) in self.ancestors

    def render_child(
        self, value: object, segment: PathSegment, parent: object | None = None
    ) -> str:
        """
        Render a nested value from inside a custom render function.

        The child is rendered by the same call, so its imports are collected and
        failures carry the extended path.

        :param segment: Breadcrumb naming the child.
        :param parent: The value owning the child; pass it to enable cycle detection.
        """
        if self.dispatch is None:
            raise RuntimeError("render_child() requires a context created by a ValueRenderer")
        return self.dispatch(value, self.descend(segment, parent))


# End of file: src/mstair/snapshot/render/model.py
