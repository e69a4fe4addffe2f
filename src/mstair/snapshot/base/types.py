# File: src/mstair/snapshot/base/types.py

from __future__ import annotations

import io
import threading
from decimal import Decimal
from fractions import Fraction
from os import PathLike
from types import (
    AsyncGeneratorType,
    BuiltinFunctionType,
    BuiltinMethodType,
    CoroutineType,
    FrameType,
    FunctionType,
    GeneratorType,
    MethodType,
    ModuleType,
    TracebackType,
)
from typing import Final, Self, TypeAlias


# ---------- Static typing aliases (for annotations) ----------

StrPath: TypeAlias = str | PathLike[str]

# ---------- Runtime tuples (for isinstance/issubclass) ----------

PRIMITIVE_NON_STRING_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    Decimal,
    Fraction,
    type(None),
)
PRIMITIVE_TYPES: Final[tuple[type, ...]] = (*PRIMITIVE_NON_STRING_TYPES, str)
TEXT_LIKE_TYPES: Final[tuple[type, ...]] = (str, bytes, bytearray, memoryview)
OPAQUE_RUNTIME_TYPES: Final[tuple[type, ...]] = (
    type,
    ModuleType,
    FunctionType,
    BuiltinFunctionType,
    BuiltinMethodType,
    MethodType,
    GeneratorType,
    AsyncGeneratorType,
    CoroutineType,
    FrameType,
    TracebackType,
    io.IOBase,
    type(threading.Lock()),
    type(threading.RLock()),
    property,
    classmethod,
    staticmethod,
)
"""Runtime objects that have no source-level constructor and can never be rendered."""


def qualified_type_name(typ: type) -> str:
    """
    Return `module.QualName` for a type, or just `QualName` for builtins.

    :param typ: The type to name.
    :return str: A dotted name suitable for messages and generic-collection constructors.
    """
    module = getattr(typ, "__module__", "") or ""
    qualname = getattr(typ, "__qualname__", None) or getattr(typ, "__name__", repr(typ))
    if module in {"builtins", ""}:
        return qualname
    return f"{module}.{qualname}"


class Sentinel:
    """
    Robust singleton base class for sentinel objects such as MISSING.

    Behaves as a falsy, unique, singleton marker, distinct from None.
    """

    __slots__ = ()

    _repr_name: str = "SENTINEL"

    def __repr__(self) -> str:
        return self._repr_name

    def __str__(self) -> str:
        return self._repr_name

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return (type(self), ())

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(
        self,
        _memo: dict[int, object],
    ) -> Self:
        return self

    def __new__(cls) -> Self:
        if "_instance" in cls.__dict__:
            return cls.__dict__["_instance"]
        instance = super().__new__(cls)
        setattr(cls, "_instance", instance)
        return instance


class Missing(Sentinel):
    """Singleton indicating a missing or unset value."""

    _repr_name = "MISSING"


MISSING: Final[Missing] = Missing()


# End of file: src/mstair/snapshot/base/types.py
