"""Date, DateTime and DateTime64 columns."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, Optional

from .base import Column, UnexpectedTypeError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_DATE = date(1970, 1, 1)
_SECONDS_PER_DAY = 24 * 3600
_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_DATETIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?"
)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


def _unix_seconds(value: datetime) -> int:
    delta = _aware(value) - _EPOCH
    return delta.days * _SECONDS_PER_DAY + delta.seconds


def _unix_nanos(value: datetime) -> int:
    delta = _aware(value) - _EPOCH
    return (delta.days * _SECONDS_PER_DAY + delta.seconds) * 10**9 + delta.microseconds * 1000


def _is_zero(value: datetime) -> bool:
    offset = value.utcoffset() if value.tzinfo is not None else None
    return value.replace(tzinfo=None) == datetime.min and not offset


def _from_unix(seconds: int, tz: Optional[tzinfo], microseconds: int = 0) -> datetime:
    """The instant ``seconds`` after the epoch, in ``tz`` (local time if None)."""
    return (_EPOCH + timedelta(seconds=seconds, microseconds=microseconds)).astimezone(tz)


def _parse_datetime(text: str) -> tuple:
    match = _DATETIME_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"cannot parse {text!r} as date and time")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    nanos = int(fraction.ljust(9, "0")) if fraction else 0
    return datetime(year, month, day, hour, minute, second), nanos


class Date(Column):
    """A day count since the epoch, stored as Int16."""

    scan_type = datetime

    def __init__(self, name: str, ch_type: str, timezone: Optional[tzinfo] = None) -> None:
        super().__init__(name, ch_type)
        self.timezone = timezone
        offset = _EPOCH.astimezone(timezone).utcoffset()
        self.offset = int(offset.total_seconds()) if offset else 0

    def default_value(self) -> Any:
        return datetime.min

    def read(self, decoder: Any, is_null: bool = False) -> datetime:
        days = decoder.read_int16()
        return _from_unix(days * _SECONDS_PER_DAY - self.offset, self.timezone)

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, datetime):
            aware = _aware(value)
            offset = aware.utcoffset() or timedelta(0)
            timestamp = _unix_seconds(aware) + int(offset.total_seconds())
        elif isinstance(value, date):
            timestamp = (value - _EPOCH_DATE).days * _SECONDS_PER_DAY
        elif isinstance(value, int) and not isinstance(value, bool):
            timestamp = value + self.offset
        elif isinstance(value, str):
            timestamp = self._parse(value)
        else:
            raise UnexpectedTypeError(self, value)
        encoder.write_int16(_trunc_div(timestamp, _SECONDS_PER_DAY))

    @staticmethod
    def _parse(text: str) -> int:
        match = _DATE_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"cannot parse {text!r} as a date")
        day = date(*(int(g) for g in match.groups()))
        return (day - _EPOCH_DATE).days * _SECONDS_PER_DAY


class DateTime(Column):
    """Seconds since the epoch, stored as Int32."""

    scan_type = datetime

    def __init__(self, name: str, ch_type: str, timezone: Optional[tzinfo] = None) -> None:
        super().__init__(name, ch_type)
        self.timezone = timezone

    def default_value(self) -> Any:
        return datetime.min

    def read(self, decoder: Any, is_null: bool = False) -> datetime:
        return _from_unix(decoder.read_int32(), self.timezone)

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, datetime):
            timestamp = 0 if _is_zero(value) else _unix_seconds(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            timestamp = value
        elif isinstance(value, str):
            naive, _ = _parse_datetime(value)
            # Text without a zone is taken as local time.
            timestamp = _unix_seconds(naive.astimezone())
        else:
            raise UnexpectedTypeError(self, value)
        encoder.write_int32(timestamp)


class DateTime64(Column):
    """Ticks of 10**-precision seconds since the epoch, stored as Int64."""

    scan_type = datetime

    def __init__(self, name: str, ch_type: str, timezone: Optional[tzinfo] = None) -> None:
        super().__init__(name, ch_type)
        self.timezone = timezone

    def default_value(self) -> Any:
        return datetime.min

    @property
    def precision(self) -> int:
        """The precision given as the first parameter of the type."""
        params = self.ch_type[11:-1]
        return int(params.split(",")[0])

    def read(self, decoder: Any, is_null: bool = False) -> datetime:
        value = decoder.read_int64()
        precision = self.precision
        nanos = 0
        if precision < 19:
            nanos = value * int(10.0 ** (9 - precision))
            nanos = (nanos + 2**63) % 2**64 - 2**63
        return _from_unix(0, self.timezone, nanos // 1000)

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, datetime):
            timestamp = 0 if _is_zero(value) else _unix_nanos(value)
        elif isinstance(value, int) and not isinstance(value, bool):
            timestamp = value
        elif isinstance(value, str):
            naive, nanos = _parse_datetime(value)
            timestamp = _unix_nanos(naive.replace(tzinfo=timezone.utc)) + nanos
        else:
            raise UnexpectedTypeError(self, value)
        precision = self.precision
        if precision > 9:
            raise ValueError(f"unsupported DateTime64 precision: {precision}")
        encoder.write_int64(_trunc_div(timestamp, 10 ** (9 - precision)))