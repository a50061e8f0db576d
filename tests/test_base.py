import io

import pytest

from chproto.codec import Decoder, Encoder
from chproto.columns.base import Column, UnexpectedTypeError
from chproto.columns.numeric import UInt8


class _Byte(Column):
    scan_type = int

    def read(self, decoder, is_null=False):
        return decoder.read_uint8()

    def write(self, encoder, value):
        if not isinstance(value, int):
            raise UnexpectedTypeError(self, value)
        encoder.write_uint8(value)


def test_str_shows_name_and_type():
    column = UInt8("col", "UInt8")
    assert str(column) == "col (UInt8)"
    assert column.name == "col"
    assert column.ch_type == "UInt8"


def test_depth_is_zero_and_default_is_zero_value():
    column = UInt8("col", "UInt8")
    assert column.depth == 0
    assert column.default_value() == 0


def test_round_trip_through_subclass():
    buf = io.BytesIO()
    column = _Byte("col", "UInt8")
    column.write(Encoder(buf), 200)
    buf.seek(0)
    assert column.read(Decoder(buf), False) == 200


def test_unexpected_type_error_fields_and_message():
    column = _Byte("col", "UInt8")
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(Encoder(io.BytesIO()), "x")
    assert info.value.column is column
    assert info.value.value == "x"
    assert str(info.value) == "col (UInt8): unexpected type str"


def test_unexpected_type_error_equality():
    column = _Byte("col", "UInt8")
    other = _Byte("col", "UInt8")
    assert UnexpectedTypeError(column, "") == UnexpectedTypeError(column, "")
    assert not UnexpectedTypeError(column, "") == UnexpectedTypeError(other, "")
    assert not UnexpectedTypeError(column, 0) == UnexpectedTypeError(column, 0.0)


def test_column_is_abstract():
    with pytest.raises(TypeError):
        Column("col", "UInt8")