"""Little-endian primitive encoding and the LZ4-framed compressed stream."""

from __future__ import annotations

import struct

from . import lz4
from .cityhash import city_hash128
from .protocol import (
    BLOCK_MAX_SIZE,
    CHECKSUM_SIZE,
    COMPRESS_HEADER_SIZE,
    HEADER_SIZE,
    CompressionMethod,
)

__all__ = ["CompressWriter", "CompressReader", "Encoder", "Decoder"]

_MASK64 = (1 << 64) - 1
_MAX_VARINT_LEN = 10

_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_I32 = struct.Struct("<i")
_I64 = struct.Struct("<q")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")
_FRAME_HEADER = struct.Struct("<BII")
_CHECKSUM = struct.Struct("<QQ")


def _read_exact(reader, size: int) -> bytes:
    """Read up to ``size`` bytes, stopping early only at end of input."""
    data = bytearray()
    while len(data) < size:
        part = reader.read(size - len(data))
        if not part:
            break
        data += part
    return bytes(data)


def _flush_writer(writer) -> None:
    flush = getattr(writer, "flush", None)
    if callable(flush):
        flush()


class CompressWriter:
    """Buffers written bytes and emits them as checksummed LZ4 frames."""

    def __init__(self, writer) -> None:
        self._writer = writer
        self._data = bytearray()

    def write(self, data) -> int:
        """Buffer ``data``, emitting a frame each time the buffer fills up."""
        view = memoryview(bytes(data))
        total = len(view)
        while view:
            room = BLOCK_MAX_SIZE - len(self._data)
            self._data += view[:room]
            view = view[room:]
            if len(self._data) == BLOCK_MAX_SIZE:
                self.flush()
        return total

    def flush(self) -> None:
        """Compress whatever is buffered into one frame and write it out."""
        if not self._data:
            return
        try:
            compressed = lz4.encode(self._data)
            frame = (
                _FRAME_HEADER.pack(
                    CompressionMethod.LZ4,
                    len(compressed) + COMPRESS_HEADER_SIZE,
                    len(self._data),
                )
                + compressed
            )
            checksum = city_hash128(frame)
            self._writer.write(_CHECKSUM.pack(checksum.low, checksum.high) + frame)
            _flush_writer(self._writer)
        finally:
            self._data = bytearray()


class CompressReader:
    """Reads checksummed LZ4 frames and serves their decompressed bytes."""

    def __init__(self, reader) -> None:
        self._reader = reader
        self._data = b""
        self._pos = 0

    def read(self, size: int) -> bytes:
        """Return exactly ``size`` decompressed bytes, reading frames as needed."""
        out = bytearray()
        while len(out) < size:
            if self._pos >= len(self._data):
                self._read_frame()
            piece = self._data[self._pos:self._pos + size - len(out)]
            out += piece
            self._pos += len(piece)
        return bytes(out)

    def _read_frame(self) -> None:
        self._pos = 0
        self._data = b""
        header = _read_exact(self._reader, HEADER_SIZE)
        if not header:
            raise EOFError("end of compressed stream")
        if len(header) != HEADER_SIZE:
            raise EOFError("Lz4 decompression header EOF")
        method, compressed_size, decompressed_size = _FRAME_HEADER.unpack_from(
            header, CHECKSUM_SIZE
        )
        if method != CompressionMethod.LZ4:
            raise ValueError(f"Unknown compression method: 0x{method:02x}")
        compressed_size -= COMPRESS_HEADER_SIZE
        compressed = _read_exact(self._reader, compressed_size)
        if len(compressed) != compressed_size:
            raise ValueError("Decompress read size not match")
        self._data = lz4.decode(compressed, decompressed_size)


class Encoder:
    """Writes little-endian primitives, optionally through a compressed stream."""

    def __init__(self, output) -> None:
        self._output = output
        self._compress_output = CompressWriter(output)
        self._compress = False

    @property
    def _target(self):
        return self._compress_output if self._compress else self._output

    def select_compress(self, compress: bool) -> None:
        """Switch compression on or off, flushing pending data when turning it off."""
        if self._compress and not compress:
            self.flush()
        self._compress = compress

    def write(self, data) -> int:
        """Write raw bytes and return how many were written."""
        written = self._target.write(data)
        return len(data) if written is None else written

    def write_uvarint(self, value: int) -> None:
        value &= _MASK64
        out = bytearray()
        while value >= 0x80:
            out.append((value & 0x7F) | 0x80)
            value >>= 7
        out.append(value)
        self.write(bytes(out))

    def write_bool(self, value: bool) -> None:
        self.write_uint8(1 if value else 0)

    def write_int8(self, value: int) -> None:
        self.write_uint8(value)

    def write_int16(self, value: int) -> None:
        self.write_uint16(value)

    def write_int32(self, value: int) -> None:
        self.write_uint32(value)

    def write_int64(self, value: int) -> None:
        self.write_uint64(value)

    def write_uint8(self, value: int) -> None:
        self.write(bytes((value & 0xFF,)))

    def write_uint16(self, value: int) -> None:
        self.write(_U16.pack(value & 0xFFFF))

    def write_uint32(self, value: int) -> None:
        self.write(_U32.pack(value & 0xFFFFFFFF))

    def write_uint64(self, value: int) -> None:
        self.write(_U64.pack(value & _MASK64))

    def write_float32(self, value: float) -> None:
        self.write(_F32.pack(value))

    def write_float64(self, value: float) -> None:
        self.write(_F64.pack(value))

    def write_string(self, value: str) -> None:
        """Write a length-prefixed UTF-8 string."""
        self.write_raw_string(value.encode("utf-8", "surrogateescape"))

    def write_raw_string(self, value) -> None:
        """Write length-prefixed raw bytes."""
        data = bytes(value)
        self.write_uvarint(len(data))
        self.write(data)

    def flush(self) -> None:
        """Flush the current target, emitting a compressed frame if compressing."""
        _flush_writer(self._target)


class Decoder:
    """Reads little-endian primitives, optionally from a compressed stream."""

    def __init__(self, source) -> None:
        self._input = source
        self._compress_input = CompressReader(source)
        self._compress = False

    def select_compress(self, compress: bool) -> None:
        """Switch between the raw and the compressed input."""
        self._compress = compress

    def _read(self, size: int) -> bytes:
        source = self._compress_input if self._compress else self._input
        data = _read_exact(source, size)
        if len(data) != size:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        return data

    def read_byte(self) -> int:
        return self._read(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() == 1

    def read_uvarint(self) -> int:
        value = 0
        shift = 0
        for index in range(_MAX_VARINT_LEN):
            byte = self.read_byte()
            if byte < 0x80:
                if index == _MAX_VARINT_LEN - 1 and byte > 1:
                    break
                return value | (byte << shift)
            value |= (byte & 0x7F) << shift
            shift += 7
        raise OverflowError("varint overflows a 64-bit integer")

    def read_int8(self) -> int:
        return _I8.unpack(self._read(1))[0]

    def read_int16(self) -> int:
        return _I16.unpack(self._read(2))[0]

    def read_int32(self) -> int:
        return _I32.unpack(self._read(4))[0]

    def read_int64(self) -> int:
        return _I64.unpack(self._read(8))[0]

    def read_uint8(self) -> int:
        return self.read_byte()

    def read_uint16(self) -> int:
        return _U16.unpack(self._read(2))[0]

    def read_uint32(self) -> int:
        return _U32.unpack(self._read(4))[0]

    def read_uint64(self) -> int:
        return _U64.unpack(self._read(8))[0]

    def read_float32(self) -> float:
        return _F32.unpack(self._read(4))[0]

    def read_float64(self) -> float:
        return _F64.unpack(self._read(8))[0]

    def read_fixed(self, length: int) -> bytes:
        """Read exactly ``length`` raw bytes."""
        return self._read(length)

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string."""
        length = self.read_uvarint()
        return self.read_fixed(length).decode("utf-8", "surrogateescape")