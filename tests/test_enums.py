import pytest

from chwire.binary import Decoder, Encoder
from chwire.column_base import UnexpectedTypeError
from chwire.enums import EnumColumn, parse_enum


class _Pipe:
    def __init__(self):
        self.data = bytearray()

    def write(self, chunk):
        self.data += chunk
        return len(chunk)

    def read(self, size):
        chunk = bytes(self.data[:size])
        del self.data[:size]
        return chunk


@pytest.fixture
def pipe():
    return _Pipe()


@pytest.mark.parametrize("ch_type", ["Enum8('A'=1,'B'=2,'C'=3)", "Enum16('A'=1,'B'=2,'C'=3)"])
def test_round_trip(pipe, ch_type):
    encoder, decoder = Encoder(pipe), Decoder(pipe)
    column = parse_enum("column_name", ch_type)
    column.write(encoder, "B")
    assert column.read(decoder) == "B"
    column.write(encoder, 3)
    assert column.read(decoder) == "C"
    assert column.name == "column_name"
    assert column.ch_type == ch_type
    assert column.scan_type is str


def test_enum8_wire_bytes(pipe):
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    column.write(Encoder(pipe), "B")
    assert bytes(pipe.data) == b"\x02"


def test_enum16_wire_bytes(pipe):
    column = parse_enum("e", "Enum16('A'=1,'B'=2,'C'=3)")
    column.write(Encoder(pipe), "B")
    assert bytes(pipe.data) == b"\x02\x00"


def test_spaces_in_declaration(pipe):
    column = parse_enum("e", "Enum8('A'=1, 'B'=2, 'C'=3)")
    encoder, decoder = Encoder(pipe), Decoder(pipe)
    column.write(encoder, "C")
    assert column.read(decoder) == "C"


def test_negative_value(pipe):
    column = parse_enum("e", "Enum8('neg'=-1,'pos'=1)")
    column.write(Encoder(pipe), "neg")
    assert bytes(pipe.data) == b"\xff"
    assert column.read(Decoder(pipe)) == "neg"


def test_unexpected_type(pipe):
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(Encoder(pipe), 0.0)
    assert info.value.value == 0.0


def test_bool_is_rejected(pipe):
    column = parse_enum("e", "Enum8('A'=1)")
    with pytest.raises(UnexpectedTypeError):
        column.write(Encoder(pipe), True)


def test_unknown_ident(pipe):
    column = parse_enum("e", "Enum8('A'=1)")
    with pytest.raises(ValueError, match="invalid Enum ident"):
        column.write(Encoder(pipe), "Z")


def test_unknown_value_on_read(pipe):
    column = parse_enum("e", "Enum8('A'=1)")
    Encoder(pipe).write_int8(9)
    with pytest.raises(ValueError, match="invalid Enum value"):
        column.read(Decoder(pipe))


def test_default_value_is_first_entry():
    assert parse_enum("e", "Enum16('x'=7,'y'=8)").default_value() == 7


@pytest.mark.parametrize(
    "ch_type",
    ["Enum8", "Enum8('A')", "Enum8('A'=70000)", "Enum8('A'=x)", "Enum32('A'=1)"],
)
def test_invalid_declarations(ch_type):
    with pytest.raises(ValueError):
        parse_enum("e", ch_type)


def test_empty_mapping_rejected():
    with pytest.raises(ValueError):
        EnumColumn("e", "Enum8()", {}, False)