"""Semantic kinds and the fixed-width type aliases.

Python has a single ``int`` and a single ``float``, so fixed widths are
declared through ``Annotated`` aliases carrying a :class:`Kind` marker.
Nested ``Annotated`` flattens, so ``Annotated[Int8, Env("X")]`` keeps both
the width marker and the directive.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated


class Kind(StrEnum):
    """Semantic type identifiers used as conversion registry keys."""

    STRING = "string"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    BOOL = "bool"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DURATION = "duration"
    TIMEDELTA = "timedelta"
    LIST = "list"


# Bit widths for the integer kinds. ``int`` and ``uint`` are 64-bit.
INT_WIDTHS: dict[Kind, int] = {
    Kind.INT: 64,
    Kind.INT8: 8,
    Kind.INT16: 16,
    Kind.INT32: 32,
    Kind.INT64: 64,
}

UINT_WIDTHS: dict[Kind, int] = {
    Kind.UINT: 64,
    Kind.UINT8: 8,
    Kind.UINT16: 16,
    Kind.UINT32: 32,
    Kind.UINT64: 64,
}

Int8 = Annotated[int, Kind.INT8]
Int16 = Annotated[int, Kind.INT16]
Int32 = Annotated[int, Kind.INT32]
Int64 = Annotated[int, Kind.INT64]
UInt = Annotated[int, Kind.UINT]
UInt8 = Annotated[int, Kind.UINT8]
UInt16 = Annotated[int, Kind.UINT16]
UInt32 = Annotated[int, Kind.UINT32]
UInt64 = Annotated[int, Kind.UINT64]
Float32 = Annotated[float, Kind.FLOAT32]
Float64 = Annotated[float, Kind.FLOAT64]
