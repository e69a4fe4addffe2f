# File: src/mstair/snapshot/render/metadata.py
"""
Per-type snapshot metadata: property lists, renames, redactions, and direct render functions.

The `@snapshot_exportable` class decorator computes a `SnapshotMetadata` once, when the
class is created, and stores it as `__snapshot_metadata__`. For decorated types the
dispatcher renders from that metadata instead of structural reflection: ignored
properties are skipped, renamed properties use their new label, and redacted
properties emit a placeholder in place of the real value.

Per-property options come from `snapshot_field()` on dataclass fields, or from a
`SnapshotField` marker inside `typing.Annotated`:

    @snapshot_exportable
    @dataclass
    class Account:
        user: str
        password: Annotated[str, SnapshotField(redact=Mask())]
        token: str = snapshot_field(redact=Hash())
        session: object = snapshot_field(ignore=True, default=None)
"""

from __future__ import annotations

import dataclasses
import sys
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, overload

from mstair.snapshot.base.constants import DEFAULT_MASK_TEXT, HASH_DIGEST_CHARS
from mstair.snapshot.base.string_helpers import text_digest
from mstair.snapshot.base.types import MISSING
from mstair.snapshot.render.canonical import layout_block, quote_string
from mstair.snapshot.render.errors import ReflectionFailure
from mstair.snapshot.render.model import FieldSegment, RenderContext, RenderFn
from mstair.snapshot.xlogging import create_logger


if TYPE_CHECKING:
    from mstair.snapshot.render.value_renderer import ValueRenderer


__all__ = [
    "METADATA_ATTR",
    "SNAPSHOT_FIELD_KEY",
    "Hash",
    "Mask",
    "PropertyDescriptor",
    "Redaction",
    "SnapshotField",
    "SnapshotMetadata",
    "build_metadata",
    "metadata_for",
    "render_with_metadata",
    "snapshot_exportable",
    "snapshot_field",
]

LOG = create_logger(__name__)

METADATA_ATTR: Final[str] = "__snapshot_metadata__"
SNAPSHOT_FIELD_KEY: Final[str] = "mstair.snapshot"
_PENDING_ATTR: Final[str] = "__snapshot_metadata_pending__"


@dataclass(frozen=True, slots=True)
class Mask:
    """Replace the value with a fixed string literal."""

    text: str = DEFAULT_MASK_TEXT


@dataclass(frozen=True, slots=True)
class Hash:
    """Replace the value with `"<hashed:...>"`, a digest of its rendered text."""


type Redaction = Mask | Hash


@dataclass(frozen=True, slots=True)
class SnapshotField:
    """
    Per-property snapshot options.

    :param rename: Keyword label to emit instead of the attribute name.
    :param redact: Placeholder policy for sensitive values.
    :param ignore: Leave the property out of the emitted constructor call.
    """

    rename: str | None = None
    redact: Redaction | None = None
    ignore: bool = False


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    original_name: str
    renamed_label: str | None = None
    redaction: Redaction | None = None
    ignored: bool = False

    @property
    def label(self) -> str:
        return self.renamed_label or self.original_name


@dataclass(frozen=True, slots=True)
class SnapshotMetadata:
    """
    Everything the dispatcher needs to render a decorated type without reflection.

    :param type_name: Callee text to emit; None uses the class itself (and imports it).
    :param properties: Properties in constructor order.
    :param render_fn: Optional direct render function; when set, `properties` is unused.
    """

    type_name: str | None
    properties: tuple[PropertyDescriptor, ...]
    render_fn: RenderFn | None = None


def snapshot_field(
    *,
    rename: str | None = None,
    redact: Redaction | None = None,
    ignore: bool = False,
    **field_kwargs: Any,
) -> Any:
    """
    Declare a dataclass field with snapshot options.

    Accepts every `dataclasses.field()` keyword (`default`, `default_factory`, ...);
    the options are stored in the field's metadata.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[SNAPSHOT_FIELD_KEY] = SnapshotField(rename=rename, redact=redact, ignore=ignore)
    return dataclasses.field(metadata=metadata, **field_kwargs)


@overload
def snapshot_exportable[T: type](cls: T, /) -> T: ...
@overload
def snapshot_exportable[T: type](
    cls: None = None, /, *, type_name: str | None = None, render_fn: RenderFn | None = None
) -> Callable[[T], T]: ...
def snapshot_exportable(
    cls: type | None = None,
    /,
    *,
    type_name: str | None = None,
    render_fn: RenderFn | None = None,
) -> Any:
    """
    Class decorator that attaches `SnapshotMetadata` to a class.

    Usable bare (`@snapshot_exportable`) or with options
    (`@snapshot_exportable(type_name="models.User")`). Apply it above `@dataclass`.

    If an annotation names something not yet defined, metadata is built on first
    render instead.
    """

    def wrap(klass: type) -> type:
        try:
            metadata = build_metadata(klass, type_name=type_name, render_fn=render_fn)
            setattr(klass, METADATA_ATTR, metadata)
        except NameError as exc:
            LOG.debug("deferring snapshot metadata for %s: %s", klass.__qualname__, exc)
            setattr(klass, _PENDING_ATTR, (type_name, render_fn))
        return klass

    return wrap(cls) if cls is not None else wrap


def metadata_for(typ: type) -> SnapshotMetadata | None:
    """
    Return the metadata declared on exactly `typ`, not inherited from a base class.

    :raises NameError: If deferred metadata still cannot resolve its annotations.
    """
    own = vars(typ)
    metadata = own.get(METADATA_ATTR)
    if metadata is not None:
        return metadata
    pending = own.get(_PENDING_ATTR)
    if pending is None:
        return None
    metadata = build_metadata(typ, type_name=pending[0], render_fn=pending[1])
    setattr(typ, METADATA_ATTR, metadata)
    return metadata


def build_metadata(
    cls: type,
    *,
    type_name: str | None = None,
    render_fn: RenderFn | None = None,
) -> SnapshotMetadata:
    """
    Compute the property list for `cls`.

    Dataclasses contribute their `init=True` fields in declaration order; other
    classes contribute their annotated, non-ClassVar attributes, base classes first.
    Options come from `snapshot_field()` metadata, then from `SnapshotField`
    markers in `Annotated` hints.

    :raises NameError: If an annotation refers to a name that is not defined yet.
    """
    hints = _type_hints_with_extras(cls)
    names: list[str]
    field_options: dict[str, SnapshotField] = {}
    if dataclasses.is_dataclass(cls):
        names = []
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            names.append(f.name)
            if isinstance(option := f.metadata.get(SNAPSHOT_FIELD_KEY), SnapshotField):
                field_options[f.name] = option
    else:
        names = [
            name
            for name, hint in hints.items()
            if not name.startswith("__") and typing.get_origin(hint) is not typing.ClassVar
        ]

    properties: list[PropertyDescriptor] = []
    for name in names:
        option = field_options.get(name) or _annotated_option(hints.get(name)) or SnapshotField()
        properties.append(
            PropertyDescriptor(
                original_name=name,
                renamed_label=option.rename,
                redaction=option.redact,
                ignored=option.ignore,
            )
        )
    LOG.debug(
        "snapshot metadata for %s: %s",
        cls.__qualname__,
        ", ".join(p.original_name + (" (ignored)" if p.ignored else "") for p in properties),
    )
    return SnapshotMetadata(type_name=type_name, properties=tuple(properties), render_fn=render_fn)


def render_with_metadata(
    value: object,
    metadata: SnapshotMetadata,
    context: RenderContext,
    renderer: ValueRenderer,
) -> str:
    """
    Emit `TypeName(label=expr, ...)` from the declared properties.

    A hashed property's real value is rendered separately so that none of its
    text or imports reach the output.
    """
    callee = metadata.type_name or renderer.type_reference(type(value), path=context.path)
    items: list[str] = []
    for prop in metadata.properties:
        if prop.ignored:
            continue
        child = context.descend(FieldSegment(prop.original_name), value)
        raw = getattr(value, prop.original_name, MISSING)
        if raw is MISSING:
            raise ReflectionFailure(f"missing attribute {prop.original_name!r}", child.path)
        match prop.redaction:
            case Mask(text=text):
                expr = quote_string(text)
            case Hash():
                digest = text_digest(renderer.render_detached(raw, child), HASH_DIGEST_CHARS)
                expr = quote_string(f"<hashed:{digest}>")
            case _:
                expr = renderer.dispatch(raw, child)
        items.append(f"{prop.label}={expr}")
    return layout_block(f"{callee}(", items, ")")


def _type_hints_with_extras(cls: type) -> dict[str, Any]:
    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    return typing.get_type_hints(
        cls, globalns=globalns, localns={cls.__name__: cls}, include_extras=True
    )


def _annotated_option(hint: Any) -> SnapshotField | None:
    if typing.get_origin(hint) is not typing.Annotated:
        return None
    return next((x for x in hint.__metadata__ if isinstance(x, SnapshotField)), None)


# End of file: src/mstair/snapshot/render/metadata.py
