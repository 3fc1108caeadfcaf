"""Enum8 and Enum16 columns."""

from __future__ import annotations

import re
from typing import Dict, Mapping

from .column_base import Column

__all__ = ["EnumColumn", "parse_enum"]

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return ((value + half) & ((1 << bits) - 1)) - half


class EnumColumn(Column):
    """Column of named values stored as 8- or 16-bit integers."""

    scan_type = str

    def __init__(self, name: str, ch_type: str, mapping: Mapping[str, int], wide: bool) -> None:
        super().__init__(name, ch_type)
        if not mapping:
            raise ValueError(f"invalid Enum format: {ch_type}")
        self.wide = bool(wide)
        self._bits = 16 if self.wide else 8
        self._by_ident: Dict[str, int] = {
            ident: _wrap(value, self._bits) for ident, value in mapping.items()
        }
        self._by_value: Dict[int, str] = {
            value: ident for ident, value in self._by_ident.items()
        }
        self._base = next(iter(self._by_ident.values()))

    def read(self, decoder) -> str:
        value = decoder.read_int16() if self.wide else decoder.read_int8()
        try:
            return self._by_value[value]
        except KeyError:
            raise ValueError(f"invalid Enum value: {value}") from None

    def write(self, encoder, value) -> None:
        if isinstance(value, str):
            try:
                number = self._by_ident[value]
            except KeyError:
                raise ValueError(f"invalid Enum ident: {value}") from None
        elif isinstance(value, int) and not isinstance(value, bool):
            number = _wrap(value, self._bits)
        else:
            super().write(encoder, value)
            return
        if self.wide:
            encoder.write_int16(number)
        else:
            encoder.write_int8(number)

    def default_value(self) -> int:
        """Return the number of the first declared value."""
        return self._base


def parse_enum(name: str, ch_type: str) -> EnumColumn:
    """Build an Enum column from a declaration such as ``Enum8('a'=1,'b'=2)``."""
    if len(ch_type) < 8:
        raise ValueError(f"invalid Enum format: {ch_type}")
    if ch_type.startswith("Enum8"):
        data, wide = ch_type[6:], False
    elif ch_type.startswith("Enum16"):
        data, wide = ch_type[7:], True
    else:
        raise ValueError(f"'{ch_type}' is not Enum type")
    mapping: Dict[str, int] = {}
    for entry in data[:-1].split(","):
        parts = entry.split("=")
        if len(parts) != 2:
            raise ValueError(f"invalid Enum format: {ch_type}")
        ident = parts[0].strip()
        raw = parts[1].strip()
        if not _INT_RE.fullmatch(raw) or not -32768 <= int(raw) <= 32767:
            raise ValueError(f"invalid Enum value: {ch_type}")
        mapping[ident[1:-1]] = int(raw)
    return EnumColumn(name, ch_type, mapping, wide)