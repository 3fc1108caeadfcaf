"""Column construction from type names, plus the Nullable and Array wrappers."""

from __future__ import annotations

import datetime as _dt
from typing import Any, List, Optional

from .column_base import Column
from .decimals import parse_decimal
from .enums import parse_enum
from .network import IPv4Column, IPv6Column
from .numeric import FloatColumn, IntegerColumn
from .temporal import DateColumn, DateTimeColumn
from .text import StringColumn, UUIDColumn

__all__ = [
    "column_factory",
    "NullableColumn",
    "ArrayColumn",
    "parse_nullable",
    "parse_array",
]

_SIMPLE = {
    "Int8": IntegerColumn,
    "Int16": IntegerColumn,
    "Int32": IntegerColumn,
    "Int64": IntegerColumn,
    "UInt8": IntegerColumn,
    "UInt16": IntegerColumn,
    "UInt32": IntegerColumn,
    "UInt64": IntegerColumn,
    "Float32": FloatColumn,
    "Float64": FloatColumn,
    "String": StringColumn,
    "UUID": UUIDColumn,
    "IPv4": IPv4Column,
    "IPv6": IPv6Column,
}

_TIMED = {"Date": DateColumn, "DateTime": DateTimeColumn}

_ARRAY_SCAN_TYPES = (int, float, str, _dt.datetime)


def column_factory(name: str, ch_type: str, timezone: Optional[_dt.tzinfo]) -> Column:
    """Build the column that reads and writes values of wire type ``ch_type``."""
    simple = _SIMPLE.get(ch_type)
    if simple is not None:
        return simple(name, ch_type)
    timed = _TIMED.get(ch_type)
    if timed is not None:
        return timed(name, ch_type, timezone)
    if ch_type.startswith("Array"):
        return parse_array(name, ch_type, timezone)
    if ch_type.startswith("Nullable"):
        return parse_nullable(name, ch_type, timezone)
    if ch_type.startswith(("Enum8", "Enum16")):
        return parse_enum(name, ch_type)
    if ch_type.startswith("Decimal"):
        return parse_decimal(name, ch_type)
    raise ValueError(f"column: unhandled type {ch_type}")


class NullableColumn(Column):
    """Wraps a column whose values may be null, tracked in a separate null map."""

    def __init__(self, name: str, ch_type: str, inner: Column) -> None:
        super().__init__(name, ch_type)
        self.inner = inner

    @property
    def scan_type(self):  # type: ignore[override]
        return self.inner.scan_type

    def read(self, decoder):
        return self.inner.read(decoder)

    def write(self, encoder, value) -> None:
        """Ignore plain writes; nullable values are written by ``write_null``."""
        return None

    def read_nulls(self, decoder, rows: int) -> List[Any]:
        """Read the null map and then ``rows`` values, giving None for nulls."""
        flags = [decoder.read_byte() for _ in range(rows)]
        values = []
        for flag in flags:
            value = self.inner.read(decoder)
            values.append(value if flag == 0 else None)
        return values

    def write_null(self, nulls, encoder, value) -> None:
        """Write the null flag to ``nulls`` and the value (or a default) to ``encoder``."""
        if value is None:
            nulls.write(b"\x01")
            self.inner.write(encoder, self.inner.default_value())
            return
        nulls.write(b"\x00")
        self.inner.write(encoder, value)


class ArrayColumn(Column):
    """Array column; rows are lists of values of the innermost column type."""

    scan_type = list

    def __init__(self, name: str, ch_type: str, depth: int, inner: Column) -> None:
        super().__init__(name, ch_type)
        self.depth = depth
        self.inner = inner

    def read(self, decoder):
        raise TypeError("do not use Read method for Array(T) column")

    def write(self, encoder, value) -> None:
        self.inner.write(encoder, value)

    def read_array(self, decoder, rows: int) -> List[list]:
        """Read ``rows`` cumulative offsets and then the elements of each row."""
        offsets = [decoder.read_uint64() for _ in range(rows)]
        values = []
        previous = 0
        for offset in offsets:
            count = offset - previous
            previous = offset
            values.append([self.inner.read(decoder) for _ in range(count)])
        return values


def parse_nullable(name: str, ch_type: str, timezone: Optional[_dt.tzinfo]) -> NullableColumn:
    """Build a Nullable column from a declaration such as ``Nullable(Int32)``."""
    if len(ch_type) < 14:
        raise ValueError(f"invalid Nullable column type: {ch_type}")
    try:
        inner = column_factory(name, ch_type[9:-1], timezone)
    except ValueError as exc:
        raise ValueError(f"Nullable(T): {exc}") from exc
    return NullableColumn(name, ch_type, inner)


def parse_array(name: str, ch_type: str, timezone: Optional[_dt.tzinfo]) -> ArrayColumn:
    """Build an Array column from a declaration such as ``Array(Array(String))``."""
    if len(ch_type) < 11:
        raise ValueError(f"invalid Array column type: {ch_type}")
    depth = 0
    inner_type = None
    for piece in ch_type.split("Array("):
        if not piece:
            depth += 1
            continue
        if len(piece) <= depth:
            raise ValueError(f"invalid Array column type: {ch_type}")
        inner_type = piece[: len(piece) - depth]
        break
    if inner_type is None:
        raise ValueError(f"invalid Array column type: {ch_type}")
    try:
        inner = column_factory(name, inner_type, timezone)
    except ValueError as exc:
        raise ValueError(f"Array(T): {exc}") from exc
    scan_type = inner.scan_type
    if scan_type not in _ARRAY_SCAN_TYPES:
        label = getattr(scan_type, "__name__", str(scan_type))
        raise ValueError(f"unsupported Array type '{label}'")
    return ArrayColumn(name, ch_type, depth, inner)