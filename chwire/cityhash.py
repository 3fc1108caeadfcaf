"""CityHash 1.0.2 (64- and 128-bit), in the variant used for frame checksums."""

from __future__ import annotations

import struct
from typing import NamedTuple, Tuple, Union

__all__ = [
    "UInt128",
    "City64",
    "city_hash64",
    "city_hash64_with_seed",
    "city_hash64_with_seeds",
    "city_hash128",
    "city_hash128_with_seed",
]

K0 = 0xC3A5C85C97CB3127
K1 = 0xB492B66FBE98F273
K2 = 0x9AE16A3B2F90404F
K3 = 0xC949D7C7509E6557
K_MUL = 0x9DDFEA08EB382D69

_M = (1 << 64) - 1
_U64 = struct.Struct("<Q")
_U32 = struct.Struct("<I")
_PAIR = struct.Struct("<QQ")

_Pair = Tuple[int, int]


class UInt128(NamedTuple):
    """A 128-bit value as its lower and higher 64-bit halves."""

    low: int
    high: int

    def to_bytes(self) -> bytes:
        """Return the value as 16 little-endian bytes, lower half first."""
        return _PAIR.pack(self.low, self.high)


def _f64(s: bytes, pos: int) -> int:
    return _U64.unpack_from(s, pos)[0]


def _f32(s: bytes, pos: int) -> int:
    return _U32.unpack_from(s, pos)[0]


def _rot(val: int, shift: int) -> int:
    if shift == 0:
        return val
    return ((val >> shift) | (val << (64 - shift))) & _M


def _shift_mix(val: int) -> int:
    return val ^ (val >> 47)


def _hash_len16(u: int, v: int, mul: int = K_MUL) -> int:
    a = ((u ^ v) * mul) & _M
    a ^= a >> 47
    b = ((v ^ a) * mul) & _M
    b ^= b >> 47
    return (b * mul) & _M


def _hash_len0to16(s: bytes, start: int, length: int) -> int:
    if length > 8:
        a = _f64(s, start)
        b = _f64(s, start + length - 8)
        return _hash_len16(a, _rot((b + length) & _M, length)) ^ b
    if length >= 4:
        a = _f32(s, start)
        return _hash_len16((length + (a << 3)) & _M, _f32(s, start + length - 4))
    if length > 0:
        a = s[start]
        b = s[start + (length >> 1)]
        c = s[start + length - 1]
        y = a + (b << 8)
        z = length + (c << 2)
        return (_shift_mix(((y * K2) & _M) ^ ((z * K3) & _M)) * K2) & _M
    return K2


def _hash_len17to32(s: bytes, start: int, length: int) -> int:
    a = (_f64(s, start) * K1) & _M
    b = _f64(s, start + 8)
    c = (_f64(s, start + length - 8) * K2) & _M
    d = (_f64(s, start + length - 16) * K0) & _M
    return _hash_len16(
        (_rot((a - b) & _M, 43) + _rot(c, 30) + d) & _M,
        (a + _rot(b ^ K3, 20) - c + length) & _M,
    )


def _weak_hash32(w: int, x: int, y: int, z: int, a: int, b: int) -> _Pair:
    a = (a + w) & _M
    b = _rot((b + a + z) & _M, 21)
    c = a
    a = (a + x + y) & _M
    b = (b + _rot(a, 44)) & _M
    return (a + z) & _M, (b + c) & _M


def _weak_hash32_at(s: bytes, pos: int, a: int, b: int) -> _Pair:
    return _weak_hash32(
        _f64(s, pos), _f64(s, pos + 8), _f64(s, pos + 16), _f64(s, pos + 24), a, b
    )


def _hash_len33to64(s: bytes, length: int) -> int:
    z = _f64(s, 24)
    a = (_f64(s, 0) + (length + _f64(s, length - 16)) * K0) & _M
    b = _rot((a + z) & _M, 52)
    c = _rot(a, 37)
    a = (a + _f64(s, 8)) & _M
    c = (c + _rot(a, 7)) & _M
    a = (a + _f64(s, 16)) & _M
    vf = (a + z) & _M
    vs = (b + _rot(a, 31) + c) & _M

    a = (_f64(s, 16) + _f64(s, length - 32)) & _M
    z = _f64(s, length - 8)
    b = _rot((a + z) & _M, 52)
    c = _rot(a, 37)
    a = (a + _f64(s, length - 24)) & _M
    c = (c + _rot(a, 7)) & _M
    a = (a + _f64(s, length - 16)) & _M
    wf = (a + z) & _M
    ws = (b + _rot(a, 31) + c) & _M

    r = _shift_mix((((vf + ws) * K2) + ((wf + vs) * K0)) & _M)
    return (_shift_mix((r * K0 + vs) & _M) * K2) & _M


def city_hash64(data) -> int:
    """Return the 64-bit CityHash of ``data``."""
    s = bytes(data)
    length = len(s)
    if length <= 16:
        return _hash_len0to16(s, 0, length)
    if length <= 32:
        return _hash_len17to32(s, 0, length)
    if length <= 64:
        return _hash_len33to64(s, length)

    x = _f64(s, 0)
    y = _f64(s, length - 16) ^ K1
    z = _f64(s, length - 56) ^ K0
    v = _weak_hash32_at(s, length - 64, length, y)
    w = _weak_hash32_at(s, length - 32, (length * K1) & _M, K0)

    z = (z + _shift_mix(v[1]) * K1) & _M
    x = (_rot((z + x) & _M, 39) * K1) & _M
    y = (_rot(y, 33) * K1) & _M

    remaining = (length - 1) & ~63
    pos = 0
    while True:
        x = (_rot((x + y + v[0] + _f64(s, pos + 16)) & _M, 37) * K1) & _M
        y = (_rot((y + v[1] + _f64(s, pos + 48)) & _M, 42) * K1) & _M
        x ^= w[1]
        y ^= v[0]
        z = _rot(z ^ w[0], 33)
        v = _weak_hash32_at(s, pos, (v[1] * K1) & _M, (x + w[0]) & _M)
        w = _weak_hash32_at(s, pos + 32, (z + w[1]) & _M, y)
        z, x = x, z
        pos += 64
        remaining -= 64
        if remaining == 0:
            break

    return _hash_len16(
        (_hash_len16(v[0], w[0]) + _shift_mix(y) * K1 + z) & _M,
        (_hash_len16(v[1], w[1]) + x) & _M,
    )


def city_hash64_with_seed(data, seed: int) -> int:
    """Return the 64-bit CityHash of ``data`` mixed with one seed."""
    return city_hash64_with_seeds(data, K2, seed)


def city_hash64_with_seeds(data, seed0: int, seed1: int) -> int:
    """Return the 64-bit CityHash of ``data`` mixed with two seeds."""
    return _hash_len16((city_hash64(data) - seed0) & _M, seed1 & _M)


def _city_murmur(s: bytes, start: int, length: int, seed: _Pair) -> _Pair:
    a, b = seed
    c = 0
    d = 0
    remaining = length - 16
    if remaining <= 0:
        a = (_shift_mix((a * K1) & _M) * K1) & _M
        c = (b * K1 + _hash_len0to16(s, start, length)) & _M
        if length >= 8:
            d = _shift_mix((a + _f64(s, start)) & _M)
        else:
            d = _shift_mix((a + c) & _M)
    else:
        c = _hash_len16((_f64(s, start + length - 8) + K1) & _M, a)
        d = _hash_len16((b + length) & _M, (c + _f64(s, start + length - 16)) & _M)
        a = (a + d) & _M
        pos = start
        while True:
            a ^= (_shift_mix((_f64(s, pos) * K1) & _M) * K1) & _M
            a = (a * K1) & _M
            b ^= a
            c ^= (_shift_mix((_f64(s, pos + 8) * K1) & _M) * K1) & _M
            c = (c * K1) & _M
            d ^= c
            pos += 16
            remaining -= 16
            if remaining <= 0:
                break
    a = _hash_len16(a, c)
    b = _hash_len16(d, b)
    return a ^ b, _hash_len16(b, a)


def _city_hash128_with_seed(s: bytes, start: int, length: int, seed: _Pair) -> _Pair:
    if length < 128:
        return _city_murmur(s, start, length, seed)

    x, y = seed
    z = (length * K1) & _M
    pos = start

    v0 = (_rot(y ^ K1, 49) * K1 + _f64(s, pos)) & _M
    v1 = (_rot(v0, 42) * K1 + _f64(s, pos + 8)) & _M
    w0 = (_rot((y + z) & _M, 35) * K1 + x) & _M
    w1 = (_rot((x + _f64(s, pos + 88)) & _M, 53) * K1) & _M

    while True:
        for _ in range(2):
            x = (_rot((x + y + v0 + _f64(s, pos + 16)) & _M, 37) * K1) & _M
            y = (_rot((y + v1 + _f64(s, pos + 48)) & _M, 42) * K1) & _M
            x ^= w1
            y ^= v0
            z = _rot(z ^ w0, 33)
            v0, v1 = _weak_hash32_at(s, pos, (v1 * K1) & _M, (x + w0) & _M)
            w0, w1 = _weak_hash32_at(s, pos + 32, (z + w1) & _M, y)
            z, x = x, z
            pos += 64
        length -= 128
        if length < 128:
            break

    y = (y + _rot(w0, 37) * K0 + z) & _M
    x = (x + _rot((v0 + z) & _M, 49) * K0) & _M

    tail_done = 0
    while tail_done < length:
        tail_done += 32
        y = (_rot((y - x) & _M, 42) * K0 + v1) & _M
        w0 = (w0 + _f64(s, pos + length - tail_done + 16)) & _M
        x = (_rot(x, 49) * K0 + w0) & _M
        w0 = (w0 + v0) & _M
        v0, v1 = _weak_hash32_at(s, pos + length - tail_done, v0, v1)

    x = _hash_len16(x, v0)
    y = _hash_len16(y, w0)
    return (
        (_hash_len16((x + v1) & _M, w1) + y) & _M,
        _hash_len16((x + w1) & _M, (y + v1) & _M),
    )


def city_hash128_with_seed(data, seed: Union[UInt128, Tuple[int, int]]) -> UInt128:
    """Return the 128-bit CityHash of ``data`` starting from ``seed``."""
    s = bytes(data)
    low, high = seed
    return UInt128(*_city_hash128_with_seed(s, 0, len(s), (low & _M, high & _M)))


def city_hash128(data) -> UInt128:
    """Return the 128-bit CityHash of ``data``."""
    s = bytes(data)
    length = len(s)
    if length >= 16:
        seed = (_f64(s, 0) ^ K3, _f64(s, 8))
        result = _city_hash128_with_seed(s, 16, length - 16, seed)
    elif length >= 8:
        seed = (_f64(s, 0) ^ ((length * K0) & _M), _f64(s, length - 8) ^ K1)
        result = _city_hash128_with_seed(b"", 0, 0, seed)
    else:
        result = _city_hash128_with_seed(s, 0, length, (K0, K1))
    return UInt128(*result)


class City64:
    """Incremental 64-bit CityHash over everything fed to ``update``."""

    name = "city64"
    digest_size = 8
    block_size = 1

    def __init__(self) -> None:
        self._data = bytearray()

    def update(self, data) -> None:
        """Append ``data`` to the hashed input."""
        self._data += data

    def intdigest(self) -> int:
        """Return the hash of the input so far as an integer."""
        return city_hash64(self._data)

    def digest(self) -> bytes:
        """Return the hash of the input so far as 8 big-endian bytes."""
        return self.intdigest().to_bytes(8, "big")

    def hexdigest(self) -> str:
        """Return the digest as hexadecimal text."""
        return self.digest().hex()

    def reset(self) -> None:
        """Discard all input."""
        self._data.clear()