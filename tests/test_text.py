import pytest

from chwire import types
from chwire.binary import Decoder, Encoder
from chwire.column_base import UnexpectedTypeError
from chwire.text import (
    InvalidUUIDFormatError,
    StringColumn,
    UUIDColumn,
    uuid_to_bytes,
)


class _Pipe:
    def __init__(self):
        self.buffer = bytearray()

    def write(self, data):
        self.buffer += data
        return len(data)

    def read(self, size=-1):
        out = bytes(self.buffer[:size])
        del self.buffer[:size]
        return out


@pytest.fixture
def pipe():
    return _Pipe()


def _bytes_to_uuid(raw):
    h = raw.hex()
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


def test_uuid_to_bytes_null():
    origin = "00000000-0000-0000-0000-000000000000"
    assert _bytes_to_uuid(uuid_to_bytes(origin)) == origin


def test_empty_string_is_null_uuid():
    assert _bytes_to_uuid(uuid_to_bytes("")) == "00000000-0000-0000-0000-000000000000"


@pytest.mark.parametrize(
    "origin",
    [
        "a",
        "00000000-0000-0000-00000000000000000",
        "00000000-0000-0000-0000-0000000000000",
    ],
)
def test_invalid_uuid_format(origin):
    with pytest.raises(InvalidUUIDFormatError, match="invalid UUID format"):
        uuid_to_bytes(origin)


def test_error_is_also_the_types_error():
    with pytest.raises(types.InvalidUUIDFormatError, match="invalid UUID format"):
        uuid_to_bytes("zz000000-0000-0000-0000-000000000000")


def test_string_column(pipe):
    column = StringColumn("column_name", "String")
    encoder, decoder = Encoder(pipe), Decoder(pipe)
    column.write(encoder, "str_1700000000")
    assert column.read(decoder) == "str_1700000000"
    column.write(encoder, b"raw bytes")
    assert column.read(decoder) == "raw bytes"
    assert column.name == "column_name"
    assert column.ch_type == "String"
    assert column.scan_type is str
    assert column.default_value() == ""
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(encoder, 0)
    assert info.value.value == 0


@pytest.mark.parametrize(
    "uuid",
    [
        "00000000-0000-0000-0000-000000000000",
        "6e6a7955-3237-3461-3036-663239386432",
        "4c436370-6130-6461-6437-336534326163",
        "47474674-3238-3066-3236-373437666435",
        "0492351a-3cb1-4cb5-855f-e0508145a54c",
        "798c4344-de6c-4c02-95ba-fea4f7d5fafd",
    ],
)
def test_uuid_column_round_trip(pipe, uuid):
    column = UUIDColumn("column_name", "UUID")
    column.write(Encoder(pipe), uuid)
    assert len(pipe.buffer) == 16
    assert column.read(Decoder(pipe)) == uuid


def test_uuid_column_metadata_and_errors(pipe):
    column = UUIDColumn("column_name", "UUID")
    assert column.name == "column_name"
    assert column.ch_type == "UUID"
    assert column.scan_type is str
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(Encoder(pipe), 0)
    assert info.value.value == 0
    with pytest.raises(InvalidUUIDFormatError, match="invalid UUID format"):
        column.write(Encoder(pipe), "invalid-uuid")


def test_uuid_wire_order(pipe):
    column = UUIDColumn("u", "UUID")
    column.write(Encoder(pipe), "00010203-0405-0607-0809-0a0b0c0d0e0f")
    assert bytes(pipe.buffer) == bytes([7, 6, 5, 4, 3, 2, 1, 0, 15, 14, 13, 12, 11, 10, 9, 8])


def test_uuid_raw_bytes(pipe):
    column = UUIDColumn("u", "UUID")
    raw = uuid_to_bytes("0492351a-3cb1-4cb5-855f-e0508145a54c")
    column.write(Encoder(pipe), raw)
    assert column.read(Decoder(pipe)) == "0492351a-3cb1-4cb5-855f-e0508145a54c"
    with pytest.raises(InvalidUUIDFormatError):
        column.write(Encoder(pipe), b"short")