"""LZ4 block compression and decompression (raw blocks, no frame header)."""

from __future__ import annotations

import struct

__all__ = [
    "CorruptInputError",
    "InputTooLargeError",
    "MAX_INPUT_SIZE",
    "compress_bound",
    "encode",
    "decode",
]

MIN_MATCH = 4
HASH_LOG = 16
HASH_TABLE_SIZE = 1 << HASH_LOG
HASH_SHIFT = MIN_MATCH * 8 - HASH_LOG
INCOMPRESSIBLE = 128
UNINIT_HASH = 0x88888888
MF_LIMIT = 8 + MIN_MATCH
MAX_INPUT_SIZE = 0x7E000000

ML_BITS = 4
ML_MASK = (1 << ML_BITS) - 1
RUN_BITS = 8 - ML_BITS
RUN_MASK = (1 << RUN_BITS) - 1

_MASK32 = 0xFFFFFFFF
_U32 = struct.Struct("<I")
_DECR = (0, 3, 2, 3)


class CorruptInputError(ValueError):
    """The compressed input is not a valid LZ4 block."""

    def __init__(self, message: str = "corrupt input") -> None:
        super().__init__(message)


class InputTooLargeError(ValueError):
    """The input is too large to be compressed as a single block."""

    def __init__(self, message: str = "input too large") -> None:
        super().__init__(message)


def compress_bound(isize: int) -> int:
    """Return the largest possible size of a compressed block of ``isize`` bytes."""
    if isize > MAX_INPUT_SIZE:
        return 0
    return isize + isize // 255 + 16


def _write_literals(
    dst: bytearray, src: bytes, start: int, length: int, match_length: int
) -> None:
    code = RUN_MASK if length > RUN_MASK - 1 else length
    token = code << ML_BITS
    token += ML_MASK if match_length > ML_MASK - 1 else match_length
    dst.append(token)
    if code == RUN_MASK:
        rest = length - RUN_MASK
        while rest > 254:
            dst.append(255)
            rest -= 255
        dst.append(rest)
    dst += src[start:start + length]


def encode(src) -> bytes:
    """Compress ``src`` into a single LZ4 block."""
    size = len(src)
    if size >= MAX_INPUT_SIZE:
        raise InputTooLargeError()
    src = bytes(src)
    dst = bytearray()
    table = [0] * HASH_TABLE_SIZE
    read32 = _U32.unpack_from

    pos = 0
    anchor = 0
    step = 1
    limit = INCOMPRESSIBLE

    while True:
        if pos + 12 >= size:
            _write_literals(dst, src, anchor, size - anchor, 0)
            return bytes(dst)

        sequence = read32(src, pos)[0]
        digest = ((sequence * 2654435761) & _MASK32) >> HASH_SHIFT
        ref = (table[digest] + UNINIT_HASH) & _MASK32
        table[digest] = (pos - UNINIT_HASH) & _MASK32

        if ((pos - ref) & _MASK32) >> 16 or read32(src, ref)[0] != sequence:
            if pos - anchor > limit:
                limit = (limit << 1) & _MASK32
                step += 1 + (step >> 2)
            pos += step
            continue

        if step > 1:
            table[digest] = (ref - UNINIT_HASH) & _MASK32
            pos -= step - 1
            step = 1
            continue
        limit = INCOMPRESSIBLE

        literal_length = pos - anchor
        back = pos - ref
        literal_start = anchor

        pos += MIN_MATCH
        ref += MIN_MATCH
        anchor = pos

        while pos < size - 5 and src[pos] == src[ref]:
            pos += 1
            ref += 1

        match_length = pos - anchor

        _write_literals(dst, src, literal_start, literal_length, match_length)
        dst.append(back & 0xFF)
        dst.append((back >> 8) & 0xFF)

        if match_length > ML_MASK - 1:
            match_length -= ML_MASK
            while match_length > 254:
                match_length -= 255
                dst.append(255)
            dst.append(match_length)

        anchor = pos


def _read_length(src: bytes, spos: int) -> tuple[int, int]:
    total = 0
    while True:
        if spos >= len(src):
            raise CorruptInputError()
        value = src[spos]
        spos += 1
        total += value
        if value != 255:
            return total, spos


def _copy(dst: bytearray, dpos: int, ref: int, length: int, decr: int) -> tuple[int, int]:
    if ref + length < dpos:
        dst[dpos:dpos + length] = dst[ref:ref + length]
    else:
        for offset in range(length):
            dst[dpos + offset] = dst[ref + offset]
    return dpos + length, ref + length - decr


def _decode_into(src: bytes, dst: bytearray) -> None:
    n_src = len(src)
    n_dst = len(dst)
    spos = 0
    dpos = 0

    while True:
        if spos == n_src:
            return
        code = src[spos]
        spos += 1

        length = code >> ML_BITS
        if length == RUN_MASK:
            extra, spos = _read_length(src, spos)
            length += extra

        if spos + length > n_src or dpos + length > n_dst:
            raise CorruptInputError()

        dst[dpos:dpos + length] = src[spos:spos + length]
        spos += length
        dpos += length

        if spos == n_src:
            return
        if spos + 2 >= n_src:
            raise CorruptInputError()

        back = src[spos] | (src[spos + 1] << 8)
        if back > dpos:
            raise CorruptInputError()
        spos += 2
        ref = dpos - back

        length = code & ML_MASK
        if length == ML_MASK:
            extra, spos = _read_length(src, spos)
            length += extra

        if back < 4:
            if dpos + 4 > n_dst:
                raise CorruptInputError()
            dpos, ref = _copy(dst, dpos, ref, 4, _DECR[back])
        else:
            length += 4

        if dpos + length > n_dst:
            raise CorruptInputError()
        dpos, ref = _copy(dst, dpos, ref, length, 0)


def decode(src, size: int) -> bytes:
    """Decompress the LZ4 block ``src`` into a buffer of ``size`` bytes."""
    dst = bytearray(size)
    try:
        _decode_into(bytes(src), dst)
    except IndexError as exc:
        raise CorruptInputError() from exc
    return bytes(dst)