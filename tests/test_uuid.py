import pytest

from chproto.codec import Decoder, Encoder
from chproto.columns.base import UnexpectedTypeError
from chproto.columns.uuid import (
    UUID,
    InvalidUUIDFormatError,
    bytes_to_uuid,
    uuid_to_bytes,
)


class _Pipe:
    def __init__(self):
        self.data = bytearray()

    def write(self, b):
        self.data += b
        return len(b)

    def read(self, n):
        out = bytes(self.data[:n])
        del self.data[:n]
        return out


def test_uuid_to_bytes_null():
    origin = "00000000-0000-0000-0000-000000000000"
    assert bytes_to_uuid(uuid_to_bytes(origin)) == origin


def test_empty_string_is_null_uuid():
    assert bytes_to_uuid(uuid_to_bytes("")) == "00000000-0000-0000-0000-000000000000"


@pytest.mark.parametrize(
    "origin",
    [
        "a",
        "00000000-0000-0000-00000000000000000",
        "00000000-0000-0000-0000-0000000000000",
        "0000000g-0000-0000-0000-000000000000",
        "invalid-uuid",
    ],
)
def test_invalid_uuid_format(origin):
    with pytest.raises(InvalidUUIDFormatError) as info:
        uuid_to_bytes(origin)
    assert str(info.value) == "invalid UUID format"


def test_bytes_to_uuid_rejects_wrong_length():
    with pytest.raises(ValueError):
        bytes_to_uuid(b"\x00" * 15)


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
def test_column_round_trip(uuid):
    pipe = _Pipe()
    column = UUID("column_name", "UUID")
    column.write(Encoder(pipe), uuid)
    assert column.read(Decoder(pipe), False) == uuid


def test_column_wire_order():
    pipe = _Pipe()
    UUID("column_name", "UUID").write(Encoder(pipe), "0492351a-3cb1-4cb5-855f-e0508145a54c")
    assert bytes(pipe.data) == bytes.fromhex("b54cb13c1a3592044ca5458150e05f85")


def test_column_metadata():
    column = UUID("column_name", "UUID")
    assert column.name == "column_name"
    assert column.ch_type == "UUID"
    assert column.scan_type is str


def test_column_raw_bytes():
    pipe = _Pipe()
    column = UUID("column_name", "UUID")
    raw = uuid_to_bytes("798c4344-de6c-4c02-95ba-fea4f7d5fafd")
    column.write(Encoder(pipe), raw)
    assert column.read(Decoder(pipe), False) == "798c4344-de6c-4c02-95ba-fea4f7d5fafd"
    with pytest.raises(ValueError):
        column.write(Encoder(pipe), raw[:10])


def test_column_errors():
    column = UUID("column_name", "UUID")
    encoder = Encoder(_Pipe())
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(encoder, 0)
    assert info.value.value == 0
    with pytest.raises(InvalidUUIDFormatError):
        column.write(encoder, "invalid-uuid")