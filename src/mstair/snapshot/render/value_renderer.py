# File: src/mstair/snapshot/render/value_renderer.py
"""
The dispatcher: turns one Python value into Python expression text.

Resolution order for every node:

1. `None`.
2. The registry snapshot, by exact `type(value)`; the registered output is used verbatim.
3. `__snapshot_metadata__` attached by `@snapshot_exportable`.
4. The built-in renderers, for registries created without defaults.
5. Collections: `list`, `tuple`, `dict`, `set`, `frozenset`, then any other
   `Mapping`, `Sequence` or `AbstractSet` as `module.Type(<literal>)`.
6. Structural reflection.

A `ValueRenderer` is created per call. It owns the set of imports the emitted text
needs, so concurrent calls never share mutable state; the options and registry it
reads are immutable snapshots taken when the call starts.
"""

from __future__ import annotations

import builtins
import collections
from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import dataclass, replace
from typing import Any, Final

from mstair.snapshot.base.types import TEXT_LIKE_TYPES, qualified_type_name
from mstair.snapshot.render import canonical, metadata, reflection
from mstair.snapshot.render.builtin_renderers import DEFAULT_ENTRIES
from mstair.snapshot.render.errors import ReflectionFailure, SnapshotError, UnsupportedType
from mstair.snapshot.render.model import (
    EMPTY_REGISTRY,
    Expression,
    IndexSegment,
    KeySegment,
    RenderContext,
    RendererEntry,
    RenderFn,
    RenderOptions,
    RenderPath,
    format_path,
)
from mstair.snapshot.xlogging import TRACE, create_logger


__all__ = [
    "RenderResult",
    "ValueRenderer",
]

LOG = create_logger(__name__)

_BUILTIN_ENTRIES: Final[Mapping[type, RendererEntry]] = {e.type_key: e for e in DEFAULT_ENTRIES}
_DEFAULT_FACTORIES: Final[frozenset[type]] = frozenset({list, dict, set, int, float, str})


@dataclass(frozen=True, slots=True)
class RenderResult:
    """
    Outcome of one render call.

    :param text: The expression; may span lines, never ends with a newline.
    :param imports: Sorted, de-duplicated import statements the expression needs.
    :param annotation: Type annotation text for a declaration of the value.
    :param annotation_imports: Import statements the annotation needs; may overlap `imports`.
    """

    text: str
    imports: tuple[str, ...]
    annotation: str
    annotation_imports: tuple[str, ...] = ()


class ValueRenderer:
    """Single-use dispatcher for one render call."""

    def __init__(
        self,
        *,
        options: RenderOptions | None = None,
        registry: Mapping[type, RendererEntry] = EMPTY_REGISTRY,
    ) -> None:
        """
        :param options: Render options snapshot; library defaults when None.
        :param registry: Read-only registry view, usually `RendererRegistry.snapshot()`.
        """
        self.options = options or RenderOptions()
        self.registry = registry
        self.imports: set[str] = set()
        self._warned_names: set[str] = set()

    def render(self, value: object) -> RenderResult:
        """
        Render `value` and return its expression with the imports it needs.

        :raises SnapshotError: With the breadcrumb path of the failing node.
        """
        context = RenderContext(
            options=self.options, registry=self.registry, dispatch=self.dispatch
        )
        try:
            text = self.dispatch(value, context)
        except RecursionError as exc:
            raise ReflectionFailure(
                f"Python recursion limit reached below max_depth {self.options.max_depth}"
            ) from exc
        annotation_imports: set[str] = set()
        annotation = self.annotation_for(value, imports=annotation_imports)
        return RenderResult(
            text=text,
            imports=tuple(sorted(self.imports)),
            annotation=annotation,
            annotation_imports=tuple(sorted(annotation_imports)),
        )

    def dispatch(self, value: object, context: RenderContext) -> str:
        """Render one node; the entry point for recursion and for custom render functions."""
        if context.depth > context.options.max_depth:
            raise ReflectionFailure(
                f"maximum render depth {context.options.max_depth} exceeded", context.path
            )
        if value is None:
            return "None"
        typ = type(value)
        if context.is_ancestor(value):
            raise ReflectionFailure(f"cyclic reference to {qualified_type_name(typ)}", context.path)

        entry = context.registry.get(typ)
        if entry is not None:
            _trace(context, typ, "registry")
            return self.apply_render_fn(entry.render_fn, value, context, entry.imports)

        try:
            declared = metadata.metadata_for(typ)
        except NameError as exc:
            raise ReflectionFailure(
                f"cannot resolve snapshot metadata for {typ.__qualname__}: {exc}", context.path
            ) from exc
        if declared is not None:
            _trace(context, typ, "metadata")
            if declared.render_fn is not None:
                return self.apply_render_fn(declared.render_fn, value, context)
            return metadata.render_with_metadata(value, declared, context, self)

        entry = _BUILTIN_ENTRIES.get(typ)
        if entry is not None:
            _trace(context, typ, "built-in")
            return self.apply_render_fn(entry.render_fn, value, context, entry.imports)

        text = self._render_collection(value, context)
        if text is not None:
            _trace(context, typ, "collection")
            return text

        _trace(context, typ, "reflection")
        return reflection.render_structure(value, context, self)

    def apply_render_fn(
        self,
        render_fn: RenderFn,
        value: object,
        context: RenderContext,
        imports: Iterable[str] = (),
    ) -> str:
        """
        Invoke a registered or declared render function and collect its imports.

        A `SnapshotError` from the function propagates unchanged; any other exception
        is raised as `ReflectionFailure` at the current path.
        """
        type_name = qualified_type_name(type(value))
        try:
            result = render_fn(value, context)
        except SnapshotError:
            raise
        except Exception as exc:
            raise ReflectionFailure(
                f"renderer for {type_name} raised {type(exc).__name__}: {exc}", context.path
            ) from exc
        self.imports.update(imports)
        if isinstance(result, Expression):
            self.imports.update(result.imports)
            return result.text
        if not isinstance(result, str):
            raise ReflectionFailure(
                f"renderer for {type_name} returned {type(result).__name__}, expected str",
                context.path,
            )
        return result

    def render_detached(self, value: object, context: RenderContext) -> str:
        """Render `value` at `context` without adding its imports to this call's output."""
        detached = ValueRenderer(options=self.options, registry=self.registry)
        return detached.dispatch(value, replace(context, dispatch=detached.dispatch))

    def type_reference(
        self,
        typ: type,
        *,
        qualified: bool = False,
        path: RenderPath = (),
        imports: set[str] | None = None,
    ) -> str:
        """
        Return the text naming `typ` in the emitted source and record its import.

        - Builtins use their bare name.
        - `qualified=True` gives `module.QualName` with `import module`.
        - Otherwise `QualName` with `from module import Outer`.
        - Types defined in `__main__` or inside a function cannot be imported; they use
          their bare name and a warning is logged once per call.

        :param imports: Set that receives the import; defaults to this call's imports.
        :raises UnsupportedType: For builtins-module types with no public name.
        """
        module: str = getattr(typ, "__module__", "") or ""
        qualname: str = typ.__qualname__
        if module == "builtins":
            if getattr(builtins, qualname, None) is not typ:
                raise UnsupportedType(qualname, path)
            return qualname
        if module == "__main__" or "<locals>" in qualname:
            name = qualname.rpartition("<locals>.")[2]
            if name not in self._warned_names:
                self._warned_names.add(name)
                LOG.warning(
                    "%s.%s cannot be imported; the snapshot refers to it as %r",
                    module,
                    qualname,
                    name,
                )
            return name
        target = self.imports if imports is None else imports
        if qualified:
            target.add(f"import {module}")
            return f"{module}.{qualname}"
        target.add(f"from {module} import {qualname.partition('.')[0]}")
        return qualname

    def annotation_for(self, value: object, *, imports: set[str] | None = None) -> str:
        """
        Declaration annotation for `value`: `dict`, `datetime.date`, `User`, ...

        An explicit `type_name` from `@snapshot_exportable` is used verbatim, with no import.

        :param imports: Set that receives the annotation's import; defaults to this call's
            imports.
        """
        if value is None:
            return "None"
        typ = type(value)
        if typ in self.registry or typ in _BUILTIN_ENTRIES or _is_generic_collection(value):
            return self.type_reference(typ, qualified=True, imports=imports)
        declared = metadata.metadata_for(typ)
        if declared is not None and declared.type_name:
            return declared.type_name
        return self.type_reference(typ, imports=imports)

    # ---------- Collections ----------

    def _render_collection(self, value: Any, context: RenderContext) -> str | None:
        """Render `value` if it is a collection, else return None."""
        typ = type(value)
        if typ is list:
            return canonical.layout_block("[", self._render_items(value, context), "]")
        if typ is tuple:
            items = self._render_items(value, context)
            return canonical.layout_block("(", items, ")", tuple_mode=True)
        if typ is dict:
            return self._render_mapping(value, context, sort=context.options.sort_map_keys)
        if typ is set or typ is frozenset:
            if not value:
                return f"{typ.__name__}()"
            return f"{typ.__name__}({self._render_set_items(value, context)})"
        if not _is_generic_collection(value):
            return None

        if isinstance(value, Mapping):
            sort = context.options.sort_map_keys and not isinstance(value, collections.OrderedDict)
            literal = self._render_mapping(value, context, sort=sort)
        elif isinstance(value, Set):
            literal = self._render_set_items(value, context)
        else:
            literal = canonical.layout_block("[", self._render_items(value, context), "]")

        callee = self.type_reference(typ, qualified=True, path=context.path)
        if isinstance(value, collections.defaultdict):
            factory = value.default_factory
            if factory is not None and factory not in _DEFAULT_FACTORIES:
                raise UnsupportedType(
                    f"{qualified_type_name(typ)} with default_factory {factory!r}", context.path
                )
            return f"{callee}({'None' if factory is None else factory.__name__}, {literal})"
        return f"{callee}({literal})"

    def _render_items(self, values: Iterable[Any], context: RenderContext) -> list[str]:
        return [
            self.dispatch(item, context.descend(IndexSegment(i), values))
            for i, item in enumerate(values)
        ]

    def _render_set_items(self, value: Set[Any], context: RenderContext) -> str:
        """Set elements as a list literal, in rendered-text order when configured."""
        rendered = [
            (self.dispatch(item, context.descend(IndexSegment(i), value)), item)
            for i, item in enumerate(value)
        ]
        if context.options.deterministic_set_order:
            rendered = canonical.order_by_rendered_text(rendered)
        return canonical.layout_block("[", [text for text, _ in rendered], "]")

    def _render_mapping(
        self, value: Mapping[Any, Any], context: RenderContext, *, sort: bool
    ) -> str:
        """
        `{key: value, ...}`; keys are rendered values too.

        Entries are ordered by rendered key text when `sort` is set, so the order never
        depends on hash seeds or on how the keys compare natively. A key that fails to
        render is reported at the index of its entry.
        """
        keyed = [
            (self.dispatch(key, context.descend(IndexSegment(i), value)), key)
            for i, key in enumerate(value)
        ]
        if sort:
            keyed = canonical.order_by_rendered_text(keyed)
        items: list[str] = []
        for key_text, key in keyed:
            child = context.descend(KeySegment(key_text), value)
            items.append(f"{key_text}: {self.dispatch(value[key], child)}")
        return canonical.layout_block("{", items, "}")


def _is_generic_collection(value: object) -> bool:
    if isinstance(value, TEXT_LIKE_TYPES) or isinstance(value, range):
        return False
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return False
    return isinstance(value, (Mapping, Sequence, Set))


def _trace(context: RenderContext, typ: type, route: str) -> None:
    if LOG.isEnabledFor(TRACE):
        where = format_path(context.path) or "<root>"
        LOG.trace("%s: %s via %s", where, typ.__qualname__, route, stacklevel=2)


# End of file: src/mstair/snapshot/render/value_renderer.py
