"""wfmt runtime value model: the closed set of value kinds the renderer knows."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

import numpy as np


class ValueKind(Enum):
    """Kinds a formatting argument is classified into before dispatch."""

    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    COMPLEX = "complex"
    CHAR = "char"
    STRING = "string"
    BYTES = "bytes"
    POINTER = "pointer"
    COMPOSITE = "composite"
    OBJECT = "object"


INTEGER_KINDS = frozenset({ValueKind.INT, ValueKind.UINT, ValueKind.CHAR})


class Rune(int):
    """A Unicode code point argument, typed ``int32``.

    ``%c`` and ``%q`` print it as a character; ``%v`` and ``%d`` print the
    number, like any other integer.
    """

    def __new__(cls, value: int | str) -> "Rune":
        if isinstance(value, str):
            if len(value) != 1:
                raise ValueError(f"Rune expects a single character, got {value!r}")
            value = ord(value)
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        if 0 <= self <= 0x10FFFF:
            return f"Rune({chr(self)!r})"
        return f"Rune({int(self)})"


@dataclass(frozen=True)
class Pointer:
    """An opaque address argument. Address 0 is the nil pointer."""

    address: int = 0
    elem_type: str = "int"

    @classmethod
    def to(cls, target: Any, elem_type: str | None = None) -> "Pointer":
        """Pointer to a live Python object, addressed by its identity."""
        if elem_type is None:
            elem_type = adapt_value(target).type_name
        return cls(address=id(target), elem_type=elem_type)

    @classmethod
    def nil(cls, elem_type: str = "int") -> "Pointer":
        return cls(address=0, elem_type=elem_type)

    @property
    def is_nil(self) -> bool:
        return self.address == 0


@dataclass(frozen=True)
class Named:
    """Give a value an explicit type name for ``%T`` and diagnostics.

    Rendering uses the wrapped value.
    """

    value: Any
    type_name: str


@dataclass(frozen=True)
class FmtValue:
    """An argument classified into a `ValueKind`.

    ``raw`` holds the normalized payload: a Python number, ``str``, ``bytes``,
    a tuple of elements for composites, or an address for pointers.
    ``size`` is the bit size for numeric kinds. ``label`` is the type string
    printed by ``%#v`` for sequences. ``source`` keeps the original object for
    identity based addresses and cycle detection.
    """

    kind: ValueKind
    raw: Any
    type_name: str
    size: int = 64
    label: str = ""
    source: Any = None

    @property
    def is_signed(self) -> bool:
        return self.kind in (ValueKind.INT, ValueKind.CHAR)


NIL_VALUE = FmtValue(ValueKind.NIL, None, "<nil>")


def python_type_name(value: Any) -> str:
    cls = type(value)
    module = cls.__module__
    if module == "builtins":
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def _array_type_name(arr: np.ndarray) -> str:
    dims = "".join(f"[{int(d)}]" for d in arr.shape)
    return f"{dims}{arr.dtype.name}"


def _adapt_numpy_scalar(value: np.generic) -> FmtValue | None:
    bits = value.dtype.itemsize * 8
    name = value.dtype.name
    if isinstance(value, np.bool_):
        return FmtValue(ValueKind.BOOL, bool(value), "bool")
    if isinstance(value, np.signedinteger):
        return FmtValue(ValueKind.INT, int(value), name, size=bits)
    if isinstance(value, np.unsignedinteger):
        return FmtValue(ValueKind.UINT, int(value), name, size=bits)
    if isinstance(value, np.floating):
        size = 32 if bits <= 32 else 64
        return FmtValue(ValueKind.FLOAT, float(value), name, size=size)
    if isinstance(value, np.complexfloating):
        size = 64 if bits <= 64 else 128
        return FmtValue(ValueKind.COMPLEX, complex(value), name, size=size)
    return None


def _adapt_ndarray(arr: np.ndarray) -> FmtValue:
    type_name = _array_type_name(arr)
    if arr.ndim == 1 and arr.dtype == np.uint8:
        return FmtValue(
            ValueKind.BYTES, arr.tobytes(), type_name, label=type_name, source=arr
        )
    if arr.ndim == 0:
        return adapt_value(arr[()])
    return FmtValue(
        ValueKind.COMPOSITE, tuple(arr), type_name, label=type_name, source=arr
    )


def adapt_value(value: Any) -> FmtValue:
    """Classify a native Python value into the closed value model."""
    if isinstance(value, FmtValue):
        return value
    if value is None:
        return NIL_VALUE
    if isinstance(value, Named):
        return replace(adapt_value(value.value), type_name=value.type_name)
    if isinstance(value, Pointer):
        return FmtValue(
            ValueKind.POINTER, value.address, f"*{value.elem_type}", source=value
        )
    if isinstance(value, np.generic):
        adapted = _adapt_numpy_scalar(value)
        if adapted is not None:
            return adapted
    if isinstance(value, np.ndarray):
        return _adapt_ndarray(value)
    if isinstance(value, bool):
        return FmtValue(ValueKind.BOOL, value, "bool")
    if isinstance(value, Rune):
        return FmtValue(ValueKind.CHAR, int(value), "int32", size=32)
    if isinstance(value, int):
        return FmtValue(ValueKind.INT, int(value), "int")
    if isinstance(value, float):
        return FmtValue(ValueKind.FLOAT, float(value), "float64")
    if isinstance(value, complex):
        return FmtValue(ValueKind.COMPLEX, complex(value), "complex128", size=128)
    if isinstance(value, str):
        return FmtValue(ValueKind.STRING, str(value), "string")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return FmtValue(
            ValueKind.BYTES, bytes(value), "[]uint8", label="[]byte", source=value
        )
    if isinstance(value, (list, tuple)):
        return FmtValue(
            ValueKind.COMPOSITE,
            tuple(value),
            "[]interface {}",
            label="[]interface {}",
            source=value,
        )
    return FmtValue(ValueKind.OBJECT, value, python_type_name(value), source=value)
