# File: src/mstair/snapshot/render/canonical.py
"""
Canonical spellings for scalar values and the ordering rule for unordered collections.

Every function here is pure; given the same input it returns the same text on any
platform and under any locale.
"""

from __future__ import annotations

import base64
import math
from collections.abc import Iterable
from typing import Final

from mstair.snapshot.base.constants import DEFAULT_INDENT


__all__ = [
    "escape_string",
    "format_base64",
    "format_bytes_literal",
    "format_complex",
    "format_float",
    "format_int",
    "layout_block",
    "order_by_rendered_text",
    "quote_string",
]

_SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_string(text: str) -> str:
    """
    Escape `text` for use between double quotes in Python source.

    Printable ASCII is kept as is. Backslash, double quote, newline, carriage return
    and tab use their short escapes. Every other character (C0 controls, DEL,
    non-ASCII) uses the shortest of `\\xNN`, `\\uNNNN`, `\\UNNNNNNNN`, so the
    emitted file is pure ASCII.
    """
    parts: list[str] = []
    for ch in text:
        if ch in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[ch])
            continue
        code = ord(ch)
        if 0x20 <= code < 0x7F:
            parts.append(ch)
        elif code <= 0xFF:
            parts.append(f"\\x{code:02x}")
        elif code <= 0xFFFF:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    return "".join(parts)


def quote_string(text: str) -> str:
    """Return `text` as a double-quoted, fully escaped string literal."""
    return f'"{escape_string(text)}"'


def format_int(value: int) -> str:
    """Decimal digits with a leading `-` for negatives; `bool` is not accepted here."""
    return int.__repr__(value)


def format_float(value: float) -> str:
    """
    Shortest round-trip spelling of a float.

    `repr()` is non-scientific for magnitudes in [1e-4, 1e16) and exponent form
    outside it. Non-finite values have no literal, so they use the `float()`
    constructor; negative zero keeps its sign.
    """
    if math.isnan(value):
        return 'float("nan")'
    if math.isinf(value):
        return 'float("inf")' if value > 0 else '-float("inf")'
    return float.__repr__(value)


def format_complex(value: complex) -> str:
    return f"complex({format_float(value.real)}, {format_float(value.imag)})"


def format_bytes_literal(data: bytes) -> str:
    """Every byte as `\\xNN`, e.g. `b"\\x00\\xff"`, so the literal is independent of encoding."""
    return 'b"' + "".join(f"\\x{b:02x}" for b in data) + '"'


def format_base64(data: bytes) -> str:
    """Compact form for long binary values: `base64.b64decode("...")`."""
    return f'base64.b64decode("{base64.b64encode(data).decode("ascii")}")'


def layout_block(head: str, items: list[str], tail: str, *, tuple_mode: bool = False) -> str:
    """
    Join rendered elements between `head` and `tail`.

    Zero elements give `head + tail`. A single one-line element stays on one line
    (`(x,)` in `tuple_mode`). Otherwise every element goes on its own line, indented
    one level and followed by a comma:

        [
            1,
            2,
        ]

    :param items: Rendered element texts, which may themselves span several lines.
    """
    if not items:
        return head + tail
    if len(items) == 1 and "\n" not in items[0]:
        return head + items[0] + ("," if tuple_mode else "") + tail
    pad = " " * DEFAULT_INDENT
    body = "".join(pad + item.replace("\n", "\n" + pad) + ",\n" for item in items)
    return f"{head}\n{body}{tail}"


def order_by_rendered_text[T](items: Iterable[tuple[str, T]]) -> list[tuple[str, T]]:
    """
    Order `(rendered_text, payload)` pairs by the rendered text.

    Comparison is by code point, so the result never depends on the native ordering
    of the original values (which may not exist for mixed types). Ties keep their
    input order.
    """
    return sorted(items, key=lambda pair: pair[0])


# End of file: src/mstair/snapshot/render/canonical.py
