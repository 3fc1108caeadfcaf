"""Decimal(P, S) columns stored as scaled 32- or 64-bit integers."""

from __future__ import annotations

import re

from .column_base import Column

__all__ = ["DecimalColumn", "parse_decimal"]

_FACTORS10 = tuple(float(10 ** i) for i in range(19))
_INT_RE = re.compile(r"[+-]?[0-9]+")


class DecimalColumn(Column):
    """Fixed-point column; integers are written as is, floats are scaled."""

    scan_type = int

    def __init__(self, name: str, ch_type: str, precision: int, scale: int) -> None:
        super().__init__(name, ch_type)
        if precision < 1:
            raise ValueError("wrong precision of Decimal type")
        if scale < 0 or scale > precision:
            raise ValueError("wrong scale of Decimal type")
        if precision <= 9:
            self.bits = 32
        elif precision <= 18:
            self.bits = 64
        elif precision <= 38:
            raise ValueError("Decimal128 is not supported")
        else:
            raise ValueError("precision of Decimal exceeds max bound")
        self.precision = precision
        self.scale = scale

    def read(self, decoder) -> int:
        return decoder.read_int32() if self.bits == 32 else decoder.read_int64()

    def write(self, encoder, value) -> None:
        if isinstance(value, bool):
            super().write(encoder, value)
            return
        if isinstance(value, int):
            bound = 1 << (self.bits - 1)
            if not -bound <= value < bound:
                raise OverflowError(
                    f"narrowing type conversion: {value} does not fit in int{self.bits}"
                )
            fixed = value
        elif isinstance(value, float):
            fixed = int(value * _FACTORS10[self.scale])
        else:
            super().write(encoder, value)
            return
        if self.bits == 32:
            encoder.write_int32(fixed)
        else:
            encoder.write_int64(fixed)


def _parse_int(text: str, ch_type: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"'{ch_type}' is not Decimal type: invalid syntax")
    return int(text)


def parse_decimal(name: str, ch_type: str) -> DecimalColumn:
    """Build a Decimal column from a declaration such as ``Decimal(9, 2)``."""
    if (
        len(ch_type) < 12
        or not ch_type.startswith("Decimal")
        or ch_type[7] != "("
        or ch_type[-1] != ")"
    ):
        raise ValueError(f"invalid Decimal format: '{ch_type}'")
    params = ch_type[8:-1].split(",")
    if len(params) != 2:
        raise ValueError(f"invalid Decimal format: '{ch_type}'")
    precision = _parse_int(params[0].strip(), ch_type)
    if precision < 1:
        raise ValueError("wrong precision of Decimal type")
    scale = _parse_int(params[1].strip(), ch_type)
    return DecimalColumn(name, ch_type, precision, scale)