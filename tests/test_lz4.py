import random

import pytest

from chwire.lz4 import (
    MAX_INPUT_SIZE,
    CorruptInputError,
    compress_bound,
    decode,
    encode,
)

_WORDS = [
    "the", "adventure", "of", "a", "scandal", "in", "bohemia", "holmes",
    "watson", "baker", "street", "evening", "remarkable", "letter", "king",
    "photograph", "singular", "affair", "door", "window", "carriage", "said",
]


def _corpus(size: int) -> bytes:
    rng = random.Random(1661)
    parts = []
    total = 0
    while total < size:
        word = rng.choice(_WORDS)
        if rng.random() < 0.1:
            word += ".\n"
        parts.append(word)
        total += len(word) + 1
    return " ".join(parts).encode("ascii")[:size]


def _gen_bytes(size: int) -> bytes:
    rng = random.Random(size)
    return bytes(rng.randrange(1 << 30) % 122 for _ in range(size))


TEXT = _corpus(40_000)


def _roundtrip(data: bytes) -> None:
    compressed = encode(data)
    assert len(compressed) <= compress_bound(len(data))
    restored = decode(compressed, len(data))
    assert len(restored) == len(data)
    assert restored == data


def test_empty():
    assert encode(b"") == b"\x00"
    _roundtrip(b"")


def test_lengths_short():
    for length in range(1024):
        _roundtrip(TEXT[:length])


def test_lengths_long():
    for length in range(1024, len(TEXT), 1024 * 4):
        _roundtrip(TEXT[:length])


def test_words():
    _roundtrip(TEXT)
    assert len(encode(TEXT)) < len(TEXT)


@pytest.mark.parametrize("size", [5, 25, 255, 2555, 25555])
def test_random_bytes(size):
    _roundtrip(_gen_bytes(size))


def test_short_input_is_literal_only():
    assert encode(b"abc") == b"\x30abc"


def test_repeated_bytes_encoding():
    expected = bytes([0x1A, 0x61, 0x01, 0x00, 0x50]) + b"aaaaa"
    assert encode(b"a" * 20) == expected
    assert decode(expected, 20) == b"a" * 20


def test_long_literal_run_uses_extra_length_bytes():
    data = _gen_bytes(300)
    compressed = encode(data)
    assert compressed[0] >> 4 == 15
    assert decode(compressed, len(data)) == data


def test_decode_overlapping_match():
    block = bytes([0x14, ord("a"), 0x01, 0x00, 0x00])
    assert decode(block, 9) == b"a" * 9


def test_decode_destination_too_small():
    block = bytes([0x14, ord("a"), 0x01, 0x00, 0x00])
    with pytest.raises(CorruptInputError):
        decode(block, 5)


def test_decode_offset_beyond_output():
    block = bytes([0x10, ord("a"), 0x05, 0x00, 0x00])
    with pytest.raises(CorruptInputError):
        decode(block, 10)


def test_decode_truncated_literals():
    with pytest.raises(CorruptInputError):
        decode(bytes([0x50, ord("a")]), 5)


def test_decode_truncated_length():
    with pytest.raises(CorruptInputError):
        decode(bytes([0xF0]), 100)


def test_compress_bound():
    assert compress_bound(0) == 16
    assert compress_bound(1024) == 1044
    assert compress_bound(MAX_INPUT_SIZE + 1) == 0