from datetime import date, datetime, timedelta, timezone

import pytest

from chproto.columns.uuid import InvalidUUIDFormatError
from chproto.sqltypes import UUID, Date, DateTime

PLUS_THREE = timezone(timedelta(hours=3))


def test_uuid_to_bytes_round_trip():
    origin = "00000000-0000-0000-0000-000000000000"
    raw = UUID(origin).value()
    assert raw == bytes(16)
    assert UUID.scan(raw) == origin


def test_uuid_to_bytes_value():
    text = "0492351a-3cb1-4cb5-855f-e0508145a54c"
    assert UUID(text).to_bytes() == bytes.fromhex(text.replace("-", ""))
    assert UUID.scan(UUID(text).to_bytes()) == text


def test_uuid_invalid_format():
    with pytest.raises(InvalidUUIDFormatError):
        UUID("00000000x0000-0000-0000-000000000000").to_bytes()
    with pytest.raises(InvalidUUIDFormatError):
        UUID("a").to_bytes()
    with pytest.raises(InvalidUUIDFormatError):
        UUID("zz000000-0000-0000-0000-000000000000").to_bytes()


def test_uuid_scan_wrong_length():
    with pytest.raises(ValueError, match="invalid UUID length: 3"):
        UUID.scan(b"abc")
    with pytest.raises(ValueError, match="invalid UUID length: 0"):
        UUID.scan(42)


def test_uuid_scan_from_string_bytes():
    raw = "0123456789abcdef"
    assert UUID.scan(raw).to_bytes() == raw.encode()


def test_date_drops_zone():
    moment = datetime(2017, 1, 1, 23, 30, tzinfo=PLUS_THREE)
    assert Date(moment).value() == datetime(2017, 1, 1, tzinfo=timezone.utc)
    assert Date(date(2017, 1, 1)).value() == datetime(2017, 1, 1, tzinfo=timezone.utc)


def test_datetime_drops_zone():
    moment = datetime(2017, 1, 1, 12, 34, 56, 789, tzinfo=PLUS_THREE)
    assert DateTime(moment).value() == datetime(2017, 1, 1, 12, 34, 56, tzinfo=timezone.utc)