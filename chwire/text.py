"""String and UUID columns."""

from __future__ import annotations

import string

from . import types as _types
from .column_base import Column

__all__ = [
    "UUID_LEN",
    "NULL_UUID",
    "InvalidUUIDFormatError",
    "StringColumn",
    "UUIDColumn",
    "uuid_to_bytes",
]

UUID_LEN = 16
NULL_UUID = "00000000-0000-0000-0000-000000000000"

_HEX = frozenset(string.hexdigits)
_DASHES = (8, 13, 18, 23)
_BYTE_POSITIONS = (0, 2, 4, 6, 9, 11, 14, 16, 19, 21, 24, 26, 28, 30, 32, 34)


class InvalidUUIDFormatError(_types.InvalidUUIDFormatError):
    """Raised when UUID text or raw bytes are malformed."""

    def __init__(self, message: str = "invalid UUID format") -> None:
        Exception.__init__(self, message)

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "invalid UUID format"


def uuid_to_bytes(text: str) -> bytes:
    """Parse canonical UUID text into 16 bytes; empty text is the null UUID."""
    if not text:
        text = NULL_UUID
    elif len(text) != 36:
        raise InvalidUUIDFormatError()
    if any(text[i] != "-" for i in _DASHES):
        raise InvalidUUIDFormatError()
    out = bytearray()
    for pos in _BYTE_POSITIONS:
        high, low = text[pos], text[pos + 1]
        if high not in _HEX or low not in _HEX:
            raise InvalidUUIDFormatError()
        out.append(int(high + low, 16))
    return bytes(out)


def _swap(raw: bytes) -> bytes:
    """Reverse each 8-byte half, as the wire format stores UUIDs."""
    return raw[7::-1] + raw[15:7:-1]


class StringColumn(Column):
    """Variable-length string column."""

    scan_type = str

    def read(self, decoder) -> str:
        return decoder.read_string()

    def write(self, encoder, value) -> None:
        if isinstance(value, str):
            encoder.write_string(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            encoder.write_raw_string(value)
        else:
            super().write(encoder, value)


class UUIDColumn(Column):
    """UUID column, read as canonical lower-case text."""

    scan_type = str

    def read(self, decoder) -> str:
        h = _swap(decoder.read_fixed(UUID_LEN)).hex()
        return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"

    def write(self, encoder, value) -> None:
        if isinstance(value, str):
            raw = uuid_to_bytes(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) != UUID_LEN:
                raise InvalidUUIDFormatError(
                    f"invalid raw UUID len (expected {UUID_LEN}, got {len(raw)})"
                )
        else:
            super().write(encoder, value)
            return
        encoder.write(_swap(raw))