import datetime as dt

import pytest

from chwire.binary import Decoder, Encoder
from chwire.column_base import UnexpectedTypeError
from chwire.temporal import DateColumn, DateTimeColumn


class Pipe:
    def __init__(self):
        self.buffer = bytearray()

    def write(self, data):
        self.buffer += data
        return len(data)

    def read(self, size):
        out = bytes(self.buffer[:size])
        del self.buffer[:size]
        return out


@pytest.fixture
def pipe():
    return Pipe()


@pytest.fixture
def codec(pipe):
    return Encoder(pipe), Decoder(pipe)


ZONES = [
    dt.timezone.utc,
    dt.timezone(dt.timedelta(hours=3)),
    dt.timezone(dt.timedelta(hours=-5)),
]


@pytest.mark.parametrize("tz", ZONES)
def test_date_round_trip_every_hour(codec, tz):
    encoder, decoder = codec
    column = DateColumn("column_name", "Date", tz)
    today = dt.datetime(2019, 6, 15, tzinfo=tz)
    for hour in range(24):
        moment = today + dt.timedelta(hours=hour)

        column.write(encoder, moment)
        assert column.read(decoder) == today

        column.write(encoder, int(moment.timestamp()))
        assert column.read(decoder) == today

        column.write(encoder, moment.strftime("%Y-%m-%d"))
        assert column.read(decoder) == today


def test_date_metadata_and_errors(codec):
    encoder, _ = codec
    column = DateColumn("column_name", "Date", dt.timezone.utc)
    assert column.name == "column_name"
    assert column.ch_type == "Date"
    assert column.scan_type is dt.datetime
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(encoder, 1.5)
    assert info.value.value == 1.5


def test_date_wire_value(codec):
    encoder, decoder = codec
    column = DateColumn("c", "Date", dt.timezone.utc)
    column.write(encoder, dt.date(1970, 1, 11))
    assert decoder.read_int16() == 10


def test_date_bad_string(codec):
    encoder, _ = codec
    with pytest.raises(ValueError):
        DateColumn("c", "Date", dt.timezone.utc).write(encoder, "15/06/2019")


def test_date_read_is_in_column_timezone(codec):
    encoder, decoder = codec
    tz = dt.timezone(dt.timedelta(hours=3))
    column = DateColumn("c", "Date", tz)
    column.write(encoder, dt.date(2000, 1, 1))
    value = column.read(decoder)
    assert value.utcoffset() == dt.timedelta(hours=3)
    assert (value.year, value.month, value.day, value.hour) == (2000, 1, 1, 0)


@pytest.mark.parametrize("tz", ZONES)
def test_datetime_round_trip(codec, tz):
    encoder, decoder = codec
    column = DateTimeColumn("column_name", "DateTime", tz)
    now = dt.datetime(2021, 3, 4, 5, 6, 7, tzinfo=tz)

    column.write(encoder, now)
    assert column.read(decoder) == now

    column.write(encoder, now.astimezone(dt.timezone.utc).strftime("%Y-%m-%d %H:%M:%S"))
    assert column.read(decoder) == now
    assert column.ch_type == "DateTime"


def test_datetime_int_and_zero(codec):
    encoder, decoder = codec
    tz = dt.timezone(dt.timedelta(hours=2))
    column = DateTimeColumn("c", "DateTime", tz)
    column.write(encoder, 86400)
    assert column.read(decoder) == dt.datetime(1970, 1, 2, tzinfo=dt.timezone.utc)
    column.write(encoder, column.default_value())
    assert decoder.read_int32() == 0


def test_datetime_naive_uses_column_timezone(codec):
    encoder, decoder = codec
    tz = dt.timezone(dt.timedelta(hours=-5))
    column = DateTimeColumn("c", "DateTime", tz)
    column.write(encoder, dt.datetime(2020, 1, 1, 12, 0, 0))
    assert column.read(decoder) == dt.datetime(2020, 1, 1, 12, 0, 0, tzinfo=tz)


def test_datetime_rejects_other_types(codec):
    encoder, _ = codec
    with pytest.raises(UnexpectedTypeError) as info:
        DateTimeColumn("c", "DateTime", dt.timezone.utc).write(encoder, b"x")
    assert info.value.value == b"x"