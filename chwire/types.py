"""Timezone-less date values and a textual UUID type."""

from __future__ import annotations

import datetime as _dt
import string
from dataclasses import dataclass
from typing import Union

__all__ = ["InvalidUUIDFormatError", "Date", "DateTime", "UUID"]

_HEX = frozenset(string.hexdigits)
_DASHES = (8, 13, 18, 23)
_BYTE_POSITIONS = (0, 2, 4, 6, 9, 11, 14, 16, 19, 21, 24, 26, 28, 30, 32, 34)

_Moment = Union[_dt.date, _dt.datetime]


class InvalidUUIDFormatError(ValueError):
    """The text is not a UUID in 8-4-4-4-12 hexadecimal form."""

    def __init__(self, message: str = "invalid UUID format") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Date:
    """A calendar date whose timezone is dropped when sent."""

    moment: _Moment

    def value(self) -> _dt.datetime:
        """Return midnight UTC of the same calendar day."""
        m = self.moment
        return _dt.datetime(m.year, m.month, m.day, tzinfo=_dt.timezone.utc)


@dataclass(frozen=True)
class DateTime:
    """A wall-clock time whose timezone is dropped when sent."""

    moment: _Moment

    def value(self) -> _dt.datetime:
        """Return the same wall-clock time to the second, in UTC."""
        m = self.moment
        return _dt.datetime(
            m.year,
            m.month,
            m.day,
            getattr(m, "hour", 0),
            getattr(m, "minute", 0),
            getattr(m, "second", 0),
            tzinfo=_dt.timezone.utc,
        )


def _uuid_to_bytes(text: str) -> bytes:
    if len(text) < 36 or any(text[i] != "-" for i in _DASHES):
        raise InvalidUUIDFormatError()
    out = bytearray()
    for pos in _BYTE_POSITIONS:
        pair = text[pos:pos + 2]
        if not (pair[0] in _HEX and pair[1] in _HEX):
            raise InvalidUUIDFormatError()
        out.append(int(pair, 16))
    return bytes(out)


class UUID(str):
    """A UUID held as its canonical text."""

    def to_bytes(self) -> bytes:
        """Return the 16 raw bytes of the UUID."""
        return _uuid_to_bytes(self)

    @classmethod
    def from_bytes(cls, raw) -> "UUID":
        """Build a UUID from 16 raw bytes (or a 16-character string)."""
        if isinstance(raw, str):
            src = raw.encode("utf-8")
        elif isinstance(raw, (bytes, bytearray, memoryview)):
            src = bytes(raw)
        else:
            src = b""
        if len(src) != 16:
            raise ValueError(f"invalid UUID length: {len(src)}")
        h = src.hex()
        return cls(f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}")