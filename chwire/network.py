"""IP address conversion and the IPv4/IPv6 columns."""

from __future__ import annotations

import ipaddress
from typing import Union

from .column_base import Column

__all__ = [
    "InvalidScanError",
    "ip_to_binary",
    "ip_from_binary",
    "IPv4Column",
    "IPv6Column",
]

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_V4_PREFIX = b"\x00" * 10 + b"\xff\xff"


class InvalidScanError(ValueError):
    """A value cannot be turned into an IP address."""


def ip_to_binary(address) -> bytes:
    """Return ``address`` as 16 bytes, IPv4 mapped into IPv6 and right-aligned."""
    if isinstance(address, str):
        address = ipaddress.ip_address(address)
    if isinstance(address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        raw = address.packed
    elif isinstance(address, (bytes, bytearray, memoryview)):
        raw = bytes(address)
    else:
        raise TypeError(f"cannot convert {type(address).__name__} to an IP address")
    if len(raw) >= 16:
        return raw
    padded = bytearray(16 - len(raw)) + raw
    if len(raw) == 4:
        padded[10] = padded[11] = 0xFF
    return bytes(padded)


def ip_from_binary(value) -> Address:
    """Build an address from 4 or 16 raw bytes (or a string of that many bytes)."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = value.encode("latin-1")
        except UnicodeEncodeError:
            raise InvalidScanError("Invalid scan value") from None
    else:
        raise InvalidScanError("Invalid scan types")
    if len(raw) == 4:
        return ipaddress.IPv4Address(raw)
    if len(raw) == 16:
        return ipaddress.IPv6Address(raw)
    raise InvalidScanError("Invalid scan value")


class IPv4Column(Column):
    """IPv4 column, stored as four bytes in reverse order."""

    def read(self, decoder) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(decoder.read_fixed(4)[::-1])

    def write(self, encoder, value) -> None:
        if isinstance(value, ipaddress.IPv4Address):
            address = value
        elif isinstance(value, ipaddress.IPv6Address):
            address = value.ipv4_mapped
            if address is None:
                raise ValueError(f"{value} is not an IPv4 address")
        else:
            super().write(encoder, value)
            return
        encoder.write(address.packed[::-1])


class IPv6Column(Column):
    """IPv6 column, stored as sixteen bytes."""

    def read(self, decoder) -> ipaddress.IPv6Address:
        return ipaddress.IPv6Address(decoder.read_fixed(16))

    def write(self, encoder, value) -> None:
        if isinstance(value, ipaddress.IPv6Address):
            raw = value.packed
        elif isinstance(value, ipaddress.IPv4Address):
            raw = _V4_PREFIX + value.packed
        else:
            super().write(encoder, value)
            return
        encoder.write(raw)