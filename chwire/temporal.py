"""Date and DateTime columns."""

from __future__ import annotations

import datetime as _dt

from .column_base import Column

__all__ = ["DateColumn", "DateTimeColumn"]

_SECONDS_PER_DAY = 24 * 3600
_ONE_SECOND = _dt.timedelta(seconds=1)
_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)
_EPOCH_NAIVE = _dt.datetime(1970, 1, 1)
_EPOCH_DATE = _dt.date(1970, 1, 1)
_ZERO_TIME = _dt.datetime(1, 1, 1, tzinfo=_dt.timezone.utc)


def _trunc_div(value: int, divisor: int) -> int:
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient


def _from_unix(seconds: int, timezone: _dt.tzinfo) -> _dt.datetime:
    return (_EPOCH + _dt.timedelta(seconds=seconds)).astimezone(timezone)


def _utc_seconds(text: str, fmt: str) -> int:
    parsed = _dt.datetime.strptime(text, fmt)
    return (parsed - _EPOCH_NAIVE) // _ONE_SECOND


class DateColumn(Column):
    """Calendar day stored as a 16-bit day count since the epoch."""

    scan_type = _dt.datetime

    def __init__(self, name: str, ch_type: str, timezone: _dt.tzinfo) -> None:
        super().__init__(name, ch_type)
        self.timezone = timezone
        offset = _EPOCH.astimezone(timezone).utcoffset() or _dt.timedelta(0)
        self._offset = offset // _ONE_SECOND

    def read(self, decoder) -> _dt.datetime:
        days = decoder.read_int16()
        return _from_unix(days * _SECONDS_PER_DAY - self._offset, self.timezone)

    def write(self, encoder, value) -> None:
        if isinstance(value, _dt.datetime):
            wall = value.replace(tzinfo=None)
            timestamp = (wall - _EPOCH_NAIVE) // _ONE_SECOND
        elif isinstance(value, _dt.date):
            timestamp = (value - _EPOCH_DATE).days * _SECONDS_PER_DAY
        elif isinstance(value, int) and not isinstance(value, bool):
            timestamp = value + self._offset
        elif isinstance(value, str):
            timestamp = _utc_seconds(value, "%Y-%m-%d")
        else:
            super().write(encoder, value)
            return
        encoder.write_int16(_trunc_div(timestamp, _SECONDS_PER_DAY))

    def default_value(self) -> _dt.datetime:
        return _ZERO_TIME


def _is_zero(value: _dt.datetime) -> bool:
    return value.replace(tzinfo=None) == _dt.datetime.min and not value.utcoffset()


class DateTimeColumn(Column):
    """Moment stored as 32-bit seconds since the epoch."""

    scan_type = _dt.datetime

    def __init__(self, name: str, ch_type: str, timezone: _dt.tzinfo) -> None:
        super().__init__(name, ch_type)
        self.timezone = timezone

    def read(self, decoder) -> _dt.datetime:
        return _from_unix(decoder.read_int32(), self.timezone)

    def write(self, encoder, value) -> None:
        if isinstance(value, _dt.datetime):
            timestamp = 0
            if not _is_zero(value):
                if value.tzinfo is None:
                    value = value.replace(tzinfo=self.timezone)
                timestamp = (value - _EPOCH) // _ONE_SECOND
        elif isinstance(value, int) and not isinstance(value, bool):
            timestamp = value
        elif isinstance(value, str):
            timestamp = _utc_seconds(value, "%Y-%m-%d %H:%M:%S")
        else:
            super().write(encoder, value)
            return
        encoder.write_int32(timestamp)

    def default_value(self) -> _dt.datetime:
        return _ZERO_TIME