# File: src/mstair/snapshot/render/builtin_renderers.py
"""
Render functions for scalar and standard-library value types.

Each function takes `(value, context)` and returns expression text. They are
installed into every `RendererRegistry` as ordinary entries (see `DEFAULT_ENTRIES`),
so a user registration for the same type overrides them.

Collections are not handled here; the dispatcher owns them because their
elements must be rendered recursively with breadcrumbs.
"""

from __future__ import annotations

import datetime
import decimal
import fractions
import pathlib
import urllib.parse
import uuid
from typing import Final

from mstair.snapshot.base.types import qualified_type_name
from mstair.snapshot.render import canonical
from mstair.snapshot.render.errors import UnsupportedType
from mstair.snapshot.render.model import Expression, RenderContext, RendererEntry


__all__ = [
    "DEFAULT_ENTRIES",
    "render_bool",
    "render_bytearray",
    "render_bytes",
    "render_complex",
    "render_date",
    "render_datetime",
    "render_decimal",
    "render_float",
    "render_fraction",
    "render_int",
    "render_none",
    "render_path",
    "render_range",
    "render_str",
    "render_time",
    "render_timedelta",
    "render_url",
    "render_uuid",
]

_EPOCH: Final[datetime.datetime] = datetime.datetime(1970, 1, 1, tzinfo=datetime.UTC)
_ONE_MICROSECOND: Final[datetime.timedelta] = datetime.timedelta(microseconds=1)


# ---------- Scalars ----------


def render_none(_value: None, _context: RenderContext) -> str:
    return "None"


def render_bool(value: bool, _context: RenderContext) -> str:
    return "True" if value else "False"


def render_int(value: int, _context: RenderContext) -> str:
    return canonical.format_int(value)


def render_float(value: float, _context: RenderContext) -> str:
    return canonical.format_float(value)


def render_complex(value: complex, _context: RenderContext) -> str:
    return canonical.format_complex(value)


def render_str(value: str, _context: RenderContext) -> str:
    return canonical.quote_string(value)


def render_bytes(value: bytes, context: RenderContext) -> str | Expression:
    """
    Inline `b"\\xNN..."` up to `inline_binary_threshold` bytes, base64 above it.

    The boundary is inclusive: with the default threshold of 16, a 16-byte value is
    inline and a 17-byte value is base64.
    """
    if len(value) <= context.options.inline_binary_threshold:
        return canonical.format_bytes_literal(value)
    return Expression(canonical.format_base64(value), ("import base64",))


def render_bytearray(value: bytearray, context: RenderContext) -> str | Expression:
    inner = render_bytes(bytes(value), context)
    if isinstance(inner, Expression):
        return Expression(f"bytearray({inner.text})", inner.imports)
    return f"bytearray({inner})"


# ---------- Dates and times ----------


def render_datetime(value: datetime.datetime, _context: RenderContext) -> str:
    """
    Render as an epoch-seconds constructor in UTC.

    Aware values keep their instant but not their zone. Naive values are read as
    UTC and get `.replace(tzinfo=None)`, so they compare equal to the original.
    Seconds are written as exact decimal text, which `fromtimestamp()` rounds back
    to the original microsecond.
    """
    aware = value if value.tzinfo is not None else value.replace(tzinfo=datetime.UTC)
    micros = (aware - _EPOCH) // _ONE_MICROSECOND
    seconds, fraction = divmod(abs(micros), 1_000_000)
    timestamp = ("-" if micros < 0 else "") + str(seconds)
    if fraction:
        timestamp += f".{fraction:06d}".rstrip("0")
    text = f"datetime.datetime.fromtimestamp({timestamp}, tz=datetime.timezone.utc)"
    if value.tzinfo is None:
        text += ".replace(tzinfo=None)"
    return text


def render_date(value: datetime.date, _context: RenderContext) -> str:
    return f"datetime.date({value.year}, {value.month}, {value.day})"


def render_time(value: datetime.time, context: RenderContext) -> str:
    if value.tzinfo is not None:
        raise UnsupportedType(f"{qualified_type_name(type(value))} with tzinfo", context.path)
    parts = [value.hour, value.minute, value.second]
    if value.microsecond:
        parts.append(value.microsecond)
    return f"datetime.time({', '.join(str(p) for p in parts)})"


def render_timedelta(value: datetime.timedelta, _context: RenderContext) -> str:
    """`datetime.timedelta(days=1, seconds=30)`; zero parts are omitted."""
    parts = [
        f"{name}={amount}"
        for name, amount in (
            ("days", value.days),
            ("seconds", value.seconds),
            ("microseconds", value.microseconds),
        )
        if amount
    ]
    return f"datetime.timedelta({', '.join(parts) or '0'})"


# ---------- Other standard-library types ----------


def render_uuid(value: uuid.UUID, _context: RenderContext) -> str:
    return f"uuid.UUID({canonical.quote_string(str(value))})"


def render_url(
    value: urllib.parse.SplitResult | urllib.parse.ParseResult, _context: RenderContext
) -> str:
    function = "urlparse" if isinstance(value, urllib.parse.ParseResult) else "urlsplit"
    return f"urllib.parse.{function}({canonical.quote_string(value.geturl())})"


def render_decimal(value: decimal.Decimal, _context: RenderContext) -> str:
    return f"decimal.Decimal({canonical.quote_string(str(value))})"


def render_fraction(value: fractions.Fraction, _context: RenderContext) -> str:
    return f"fractions.Fraction({value.numerator}, {value.denominator})"


def render_path(value: pathlib.PurePath, _context: RenderContext) -> str:
    """
    Concrete paths render as `pathlib.Path(...)`, pure paths keep their flavor.

    The text is always posix style, which every flavor accepts.
    """
    if isinstance(value, pathlib.Path):
        class_name = "Path"
    else:
        class_name = type(value).__name__
    return f"pathlib.{class_name}({canonical.quote_string(value.as_posix())})"


def render_range(value: range, _context: RenderContext) -> str:
    if value.step != 1:
        args = [value.start, value.stop, value.step]
    elif value.start:
        args = [value.start, value.stop]
    else:
        args = [value.stop]
    return f"range({', '.join(str(a) for a in args)})"


def _entries() -> tuple[RendererEntry, ...]:
    dt = ("import datetime",)
    return (
        RendererEntry(type(None), render_none),
        RendererEntry(bool, render_bool),
        RendererEntry(int, render_int),
        RendererEntry(float, render_float),
        RendererEntry(complex, render_complex),
        RendererEntry(str, render_str),
        RendererEntry(bytes, render_bytes),
        RendererEntry(bytearray, render_bytearray),
        RendererEntry(range, render_range),
        RendererEntry(datetime.datetime, render_datetime, dt),
        RendererEntry(datetime.date, render_date, dt),
        RendererEntry(datetime.time, render_time, dt),
        RendererEntry(datetime.timedelta, render_timedelta, dt),
        RendererEntry(uuid.UUID, render_uuid, ("import uuid",)),
        RendererEntry(urllib.parse.SplitResult, render_url, ("import urllib.parse",)),
        RendererEntry(urllib.parse.ParseResult, render_url, ("import urllib.parse",)),
        RendererEntry(decimal.Decimal, render_decimal, ("import decimal",)),
        RendererEntry(fractions.Fraction, render_fraction, ("import fractions",)),
        *(
            RendererEntry(path_type, render_path, ("import pathlib",))
            for path_type in (
                pathlib.PurePath,
                pathlib.PurePosixPath,
                pathlib.PureWindowsPath,
                pathlib.Path,
                pathlib.PosixPath,
                pathlib.WindowsPath,
            )
        ),
    )


DEFAULT_ENTRIES: Final[tuple[RendererEntry, ...]] = _entries()


# End of file: src/mstair/snapshot/render/builtin_renderers.py
