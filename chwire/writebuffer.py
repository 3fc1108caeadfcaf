"""A chunked, growable write buffer backed by a small pool of reusable buffers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

__all__ = [
    "INITIAL_SIZE",
    "BytePool",
    "init_byte_pool",
    "get_bytes",
    "put_bytes",
    "WriteBuffer",
]

INITIAL_SIZE = 256 * 1024
_MIN_CHUNK = 64


class BytePool:
    """A bounded pool of byte buffers; surplus buffers are dropped."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("pool size must not be negative")
        self._size = size
        self._items: deque[bytearray] = deque()
        self._lock = threading.Lock()

    def get(self, size: int, capacity: int) -> bytearray:
        """Return a pooled buffer, or a fresh one of ``max(size, capacity)`` bytes."""
        with self._lock:
            if self._items:
                return self._items.popleft()
        return bytearray(max(size, capacity))

    def put(self, chunk: bytearray) -> None:
        """Give ``chunk`` back to the pool, dropping it if the pool is full."""
        with self._lock:
            if len(self._items) < self._size:
                self._items.append(chunk)


_pool = BytePool(0)


def init_byte_pool(size: int) -> None:
    """Replace the shared pool with an empty one holding at most ``size`` buffers."""
    global _pool
    _pool = BytePool(size)


def get_bytes(size: int, capacity: int) -> bytearray:
    """Take a buffer from the shared pool."""
    return _pool.get(size, capacity)


def put_bytes(chunk: bytearray) -> None:
    """Return a buffer to the shared pool."""
    _pool.put(chunk)


@dataclass
class _Chunk:
    buffer: bytearray
    used: int = 0

    @property
    def capacity(self) -> int:
        return len(self.buffer)

    @property
    def free(self) -> int:
        return len(self.buffer) - self.used

    def append(self, data) -> None:
        end = self.used + len(data)
        self.buffer[self.used:end] = data
        self.used = end

    def contents(self) -> bytes:
        return bytes(self.buffer[:self.used])


class WriteBuffer:
    """Accumulates written bytes in chunks that double in size as they fill."""

    def __init__(self, initial_size: int) -> None:
        self._chunks: list[_Chunk] = []
        self._add_chunk(0, initial_size)

    def _add_chunk(self, size: int, capacity: int) -> _Chunk:
        buffer = get_bytes(size, capacity)
        chunk = _Chunk(buffer, min(size, len(buffer)))
        self._chunks.append(chunk)
        return chunk

    def _calc_cap(self, data_size: int) -> int:
        data_size = max(data_size, _MIN_CHUNK)
        if not self._chunks:
            return data_size
        return max(data_size, self._chunks[-1].capacity * 2)

    def write(self, data) -> int:
        """Append ``data`` and return the number of bytes written."""
        view = memoryview(bytes(data)) if not isinstance(data, (bytes, bytearray)) else memoryview(data)
        total = len(view)
        chunk = self._chunks[-1]
        while True:
            free = chunk.free
            if free >= len(view):
                chunk.append(view)
                return total
            chunk.append(view[:free])
            view = view[free:]
            chunk = self._add_chunk(0, self._calc_cap(len(view)))

    def write_to(self, writer) -> int:
        """Write all buffered bytes to ``writer``, then empty the buffer."""
        try:
            total = 0
            for chunk in self._chunks:
                data = chunk.contents()
                written = writer.write(data)
                total += len(data) if written is None else written
            return total
        finally:
            self.reset()

    def to_bytes(self) -> bytes:
        """Return the buffered bytes."""
        return b"".join(chunk.contents() for chunk in self._chunks)

    def reset(self) -> None:
        """Empty the buffer, keeping the last chunk and recycling the others."""
        if not self._chunks:
            return
        threshold = self._chunks[0].capacity
        for chunk in self._chunks[:-1]:
            if chunk.capacity >= threshold:
                put_bytes(chunk.buffer)
            else:
                threshold = chunk.capacity
        last = self._chunks[-1]
        last.used = 0
        self._chunks = [last]

    def __len__(self) -> int:
        return sum(chunk.used for chunk in self._chunks)