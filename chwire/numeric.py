"""Fixed-width integer and floating-point columns."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

from .column_base import Column

__all__ = ["IntegerColumn", "FloatColumn"]

_F32 = struct.Struct("<f")


@dataclass(frozen=True)
class _IntSpec:
    kind: str
    accepts_bool: bool
    accepts_raw: bool


_INTEGER_SPECS = {
    "Int8": _IntSpec("int8", True, False),
    "Int16": _IntSpec("int16", False, False),
    "Int32": _IntSpec("int32", False, False),
    "Int64": _IntSpec("int64", False, True),
    "UInt8": _IntSpec("uint8", True, False),
    "UInt16": _IntSpec("uint16", False, False),
    "UInt32": _IntSpec("uint32", False, False),
    "UInt64": _IntSpec("uint64", False, True),
}

_FLOAT_KINDS = {"Float32": "float32", "Float64": "float64"}


class IntegerColumn(Column):
    """Signed or unsigned integer column; wider values wrap to the column width."""

    scan_type = int

    def __init__(self, name: str, ch_type: str) -> None:
        try:
            self._spec = _INTEGER_SPECS[ch_type]
        except KeyError:
            raise ValueError(f"not an integer column type: {ch_type}") from None
        super().__init__(name, ch_type)

    def read(self, decoder) -> int:
        return getattr(decoder, f"read_{self._spec.kind}")()

    def write(self, encoder, value) -> None:
        spec = self._spec
        if isinstance(value, bool):
            if not spec.accepts_bool:
                super().write(encoder, value)
                return
            encoder.write_uint8(1 if value else 0)
        elif isinstance(value, int):
            getattr(encoder, f"write_{spec.kind}")(value)
        elif spec.accepts_raw and isinstance(value, (bytes, bytearray, memoryview)):
            encoder.write(bytes(value))
        else:
            super().write(encoder, value)


def _to_float32(value: float) -> float:
    try:
        return _F32.unpack(_F32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


class FloatColumn(Column):
    """Single or double precision floating-point column."""

    scan_type = float

    def __init__(self, name: str, ch_type: str) -> None:
        try:
            self._kind = _FLOAT_KINDS[ch_type]
        except KeyError:
            raise ValueError(f"not a float column type: {ch_type}") from None
        super().__init__(name, ch_type)

    def read(self, decoder) -> float:
        return getattr(decoder, f"read_{self._kind}")()

    def write(self, encoder, value) -> None:
        if not isinstance(value, float):
            super().write(encoder, value)
            return
        if self._kind == "float32":
            encoder.write_float32(_to_float32(value))
        else:
            encoder.write_float64(value)