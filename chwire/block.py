"""Blocks of column data: reading from the server and building for inserts."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from .binary import Encoder
from .column_base import Column
from .columns import ArrayColumn, NullableColumn, column_factory
from .writebuffer import INITIAL_SIZE, WriteBuffer

__all__ = ["BlockInfo", "Block"]

_SECONDS_PER_DAY = 24 * 3600
_ONE_SECOND = _dt.timedelta(seconds=1)
_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)
_EPOCH_NAIVE = _dt.datetime(1970, 1, 1)


def _is_array(value) -> bool:
    return isinstance(value, (list, tuple))


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


@dataclass
class BlockInfo:
    """The block header: overflow flag and bucket number."""

    num1: int = 0
    is_overflows: bool = False
    num2: int = 0
    bucket_num: int = 0
    num3: int = 0

    def read(self, decoder) -> None:
        """Fill the header from ``decoder``."""
        self.num1 = decoder.read_uvarint()
        self.is_overflows = decoder.read_bool()
        self.num2 = decoder.read_uvarint()
        self.bucket_num = decoder.read_int32()
        self.num3 = decoder.read_uvarint()

    def write(self, encoder) -> None:
        """Write the header; a zero bucket number is sent as -1."""
        encoder.write_uvarint(1)
        encoder.write_bool(self.is_overflows)
        encoder.write_uvarint(2)
        if self.bucket_num == 0:
            self.bucket_num = -1
        encoder.write_int32(self.bucket_num)
        encoder.write_uvarint(0)


@dataclass
class _Buffer:
    offset_buffer: WriteBuffer
    column_buffer: WriteBuffer
    offset: Encoder = field(init=False)
    column: Encoder = field(init=False)

    def __post_init__(self) -> None:
        self.offset = Encoder(self.offset_buffer)
        self.column = Encoder(self.column_buffer)

    def write_to(self, writer) -> int:
        return self.offset_buffer.write_to(writer) + self.column_buffer.write_to(writer)

    def reset(self) -> None:
        self.offset_buffer.reset()
        self.column_buffer.reset()


class Block:
    """A set of columns with their row values or their encoded data."""

    def __init__(self, columns: Optional[Sequence[Column]] = None) -> None:
        self.columns: List[Column] = list(columns or ())
        self.values: List[List[Any]] = []
        self.num_rows = 0
        self.num_columns = len(self.columns)
        self.info = BlockInfo()
        self._offsets: List[List[List[int]]] = []
        self._buffers: List[_Buffer] = []

    def copy(self) -> "Block":
        """Return an empty block with the same columns and header."""
        block = Block(self.columns)
        block.num_columns = self.num_columns
        block.info = replace(self.info)
        return block

    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def read(self, server_info, decoder) -> None:
        """Read a whole block, columns and values, from ``decoder``."""
        self.info.read(decoder)
        self.num_columns = decoder.read_uvarint()
        self.num_rows = decoder.read_uvarint()
        timezone = getattr(server_info, "timezone", None)
        self.columns = []
        self.values = []
        rows = self.num_rows
        for _ in range(self.num_columns):
            name = decoder.read_string()
            ch_type = decoder.read_string()
            column = column_factory(name, ch_type, timezone)
            self.columns.append(column)
            if isinstance(column, ArrayColumn):
                values = column.read_array(decoder, rows)
            elif isinstance(column, NullableColumn):
                values = column.read_nulls(decoder, rows)
            else:
                values = [column.read(decoder) for _ in range(rows)]
            self.values.append(values)

    def _write_array(self, column: Column, value, num: int, level: int) -> None:
        if _is_array(value):
            offsets = self._offsets[num]
            if len(offsets) < level:
                offsets.append([len(value)])
            else:
                offsets[level - 1].append(offsets[level - 1][-1] + len(value))
            for item in value:
                self._write_array(column, item, num, level + 1)
        else:
            column.write(self._buffers[num].column, value)

    def append_row(self, args: Sequence[Any]) -> None:
        """Encode one row of values, one per column."""
        if len(self.columns) != len(args):
            raise ValueError(
                f"block: expected {len(self.columns)} arguments "
                f"(columns: {', '.join(self.column_names())}), got {len(args)}"
            )
        self.reserve()
        self.num_rows += 1
        for num, (column, value) in enumerate(zip(self.columns, args)):
            buffer = self._buffers[num]
            if isinstance(column, ArrayColumn):
                if not _is_array(value):
                    raise TypeError(f"unsupported Array(T) type [{type(value).__name__}]")
                self._write_array(column, value, num, 1)
            elif isinstance(column, NullableColumn):
                column.write_null(buffer.offset, buffer.column, value)
            else:
                column.write(buffer.column, value)

    def reserve(self) -> None:
        """Create the per-column buffers if they do not exist yet."""
        if self._buffers:
            return
        self._buffers = [
            _Buffer(WriteBuffer(INITIAL_SIZE), WriteBuffer(INITIAL_SIZE))
            for _ in self.columns
        ]
        self._offsets = [[] for _ in self.columns]

    def reset(self) -> None:
        """Drop all encoded rows and buffers."""
        self.num_rows = 0
        self.num_columns = 0
        for buffer in self._buffers:
            buffer.reset()
        self._offsets = []
        self._buffers = []

    def write(self, server_info, encoder) -> None:
        """Write the header, column descriptions and encoded data to ``encoder``."""
        self.info.write(encoder)
        encoder.write_uvarint(self.num_columns)
        encoder.write_uvarint(self.num_rows)
        try:
            has_data = len(self._buffers) == len(self.columns)
            for index, column in enumerate(self.columns):
                encoder.write_string(column.name)
                encoder.write_string(column.ch_type)
                if has_data:
                    for level in self._offsets[index]:
                        for offset in level:
                            encoder.write_uint64(offset)
                    self._buffers[index].write_to(encoder)
        finally:
            self.num_rows = 0
            self._offsets = [[] for _ in self._offsets]

    def _encoder(self, index: int) -> Encoder:
        self.reserve()
        return self._buffers[index].column

    def write_date(self, index: int, value) -> None:
        """Write a day count taken from the wall-clock date of ``value``."""
        if isinstance(value, _dt.datetime):
            seconds = (value.replace(tzinfo=None) - _EPOCH_NAIVE) // _ONE_SECOND
        else:
            seconds = (value - _EPOCH_NAIVE.date()).days * _SECONDS_PER_DAY
        self._encoder(index).write_uint16(_trunc_div(seconds, _SECONDS_PER_DAY))

    def write_datetime(self, index: int, value: _dt.datetime) -> None:
        """Write seconds since the epoch; naive values are taken as local time."""
        if value.tzinfo is None:
            value = value.astimezone()
        self._encoder(index).write_uint32((value - _EPOCH) // _ONE_SECOND)

    def write_bool(self, index: int, value: bool) -> None:
        self._encoder(index).write_uint8(1 if value else 0)

    def write_int8(self, index: int, value: int) -> None:
        self._encoder(index).write_int8(value)

    def write_int16(self, index: int, value: int) -> None:
        self._encoder(index).write_int16(value)

    def write_int32(self, index: int, value: int) -> None:
        self._encoder(index).write_int32(value)

    def write_int64(self, index: int, value: int) -> None:
        self._encoder(index).write_int64(value)

    def write_uint8(self, index: int, value: int) -> None:
        self._encoder(index).write_uint8(value)

    def write_uint16(self, index: int, value: int) -> None:
        self._encoder(index).write_uint16(value)

    def write_uint32(self, index: int, value: int) -> None:
        self._encoder(index).write_uint32(value)

    def write_uint64(self, index: int, value: int) -> None:
        self._encoder(index).write_uint64(value)

    def write_float32(self, index: int, value: float) -> None:
        self._encoder(index).write_float32(value)

    def write_float64(self, index: int, value: float) -> None:
        self._encoder(index).write_float64(value)

    def write_bytes(self, index: int, value) -> None:
        self._encoder(index).write_raw_string(value)

    def write_string(self, index: int, value: str) -> None:
        self._encoder(index).write_string(value)

    def write_fixed_string(self, index: int, value) -> None:
        self.columns[index].write(self._encoder(index), value)

    def write_array(self, index: int, value) -> None:
        if not _is_array(value):
            raise TypeError(f"unsupported Array(T) type [{type(value).__name__}]")
        self.reserve()
        self._write_array(self.columns[index], value, index, 1)