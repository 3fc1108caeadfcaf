import io

import pytest

from chwire.writebuffer import (
    INITIAL_SIZE,
    BytePool,
    WriteBuffer,
    get_bytes,
    init_byte_pool,
    put_bytes,
)


@pytest.fixture(autouse=True)
def _fresh_pool():
    init_byte_pool(0)
    yield
    init_byte_pool(0)


def test_safe_with_leaky_pool():
    init_byte_pool(1)
    wb = WriteBuffer(INITIAL_SIZE)

    assert wb.write(bytes(1)) == 1

    put_bytes(bytearray(INITIAL_SIZE))

    n = wb.write(bytes(INITIAL_SIZE + 1))
    assert n == INITIAL_SIZE + 1
    assert len(wb) == INITIAL_SIZE + 2
    assert wb.to_bytes() == bytes(INITIAL_SIZE + 2)


def test_writes_span_chunks():
    wb = WriteBuffer(4)
    assert wb.write(b"abc") == 3
    assert wb.write(b"defghij") == 7
    assert wb.write(bytearray(b"k" * 200)) == 200
    assert wb.to_bytes() == b"abcdefghij" + b"k" * 200
    assert len(wb) == 210


def test_write_to_empties_buffer():
    wb = WriteBuffer(8)
    wb.write(b"hello, ")
    wb.write(b"world")
    sink = io.BytesIO()
    assert wb.write_to(sink) == 12
    assert sink.getvalue() == b"hello, world"
    assert len(wb) == 0
    assert wb.to_bytes() == b""


def test_write_to_failure_resets():
    class Broken:
        def write(self, data):
            raise OSError("closed")

    wb = WriteBuffer(8)
    wb.write(b"data")
    with pytest.raises(OSError):
        wb.write_to(Broken())
    assert len(wb) == 0


def test_reset_then_reuse():
    wb = WriteBuffer(2)
    wb.write(b"0123456789")
    wb.reset()
    assert len(wb) == 0
    wb.write(b"xyz")
    assert wb.to_bytes() == b"xyz"


def test_reset_recycles_chunks_into_pool():
    init_byte_pool(4)
    wb = WriteBuffer(8)
    wb.write(bytes(100))
    wb.reset()
    recycled = get_bytes(0, 1)
    assert len(recycled) == 8


def test_byte_pool_returns_put_buffer():
    pool = BytePool(1)
    chunk = bytearray(16)
    pool.put(chunk)
    assert pool.get(0, 32) is chunk


def test_byte_pool_drops_surplus():
    pool = BytePool(1)
    first = bytearray(3)
    second = bytearray(5)
    pool.put(first)
    pool.put(second)
    assert pool.get(0, 7) is first
    fresh = pool.get(0, 7)
    assert fresh is not second
    assert len(fresh) == 7


def test_byte_pool_rejects_negative_size():
    with pytest.raises(ValueError):
        BytePool(-1)


def test_shared_pool_without_capacity_keeps_nothing():
    chunk = bytearray(10)
    put_bytes(chunk)
    fresh = get_bytes(0, 20)
    assert fresh is not chunk
    assert len(fresh) == 20


def test_shared_pool_roundtrip():
    init_byte_pool(1)
    chunk = bytearray(10)
    put_bytes(chunk)
    assert get_bytes(0, 20) is chunk