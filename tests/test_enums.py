import pytest

from chproto.codec import Decoder, Encoder
from chproto.columns.base import UnexpectedTypeError
from chproto.columns.enums import Enum, parse_enum


class _Pipe:
    def __init__(self):
        self._buf = bytearray()

    def write(self, data):
        self._buf += data
        return len(data)

    def read(self, size):
        chunk = bytes(self._buf[:size])
        del self._buf[:size]
        return chunk


@pytest.fixture
def codec():
    pipe = _Pipe()
    return Encoder(pipe), Decoder(pipe), pipe


@pytest.mark.parametrize(
    "ch_type", ["Enum8('A'=1,'B'=2,'C'=3)", "Enum16('A'=1,'B'=2,'C'=3)"]
)
def test_enum_round_trip(codec, ch_type):
    encoder, decoder, _ = codec
    column = parse_enum("column_name", ch_type)
    assert isinstance(column, Enum)
    column.write(encoder, "B")
    assert column.read(decoder, False) == "B"
    column.write(encoder, 3)
    assert column.read(decoder, False) == "C"
    assert column.name == "column_name"
    assert column.ch_type == ch_type
    assert column.scan_type is str


def test_enum8_wire_width(codec):
    encoder, _, pipe = codec
    parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)").write(encoder, "B")
    assert bytes(pipe._buf) == b"\x02"


def test_enum16_wire_width(codec):
    encoder, _, pipe = codec
    parse_enum("e", "Enum16('A'=1,'B'=2,'C'=3)").write(encoder, "B")
    assert bytes(pipe._buf) == b"\x02\x00"


def test_unexpected_types(codec):
    encoder, _, _ = codec
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    with pytest.raises(UnexpectedTypeError) as info:
        column.write(encoder, 2.5)
    assert info.value.value == 2.5
    with pytest.raises(UnexpectedTypeError):
        column.write(encoder, 300)
    with pytest.raises(UnexpectedTypeError):
        column.write(encoder, True)


def test_unknown_ident(codec):
    encoder, _, _ = codec
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    with pytest.raises(ValueError, match="invalid Enum ident"):
        column.write(encoder, "D")


def test_unknown_value_on_read(codec):
    encoder, decoder, _ = codec
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    column.write(encoder, 9)
    with pytest.raises(ValueError, match="invalid Enum value"):
        column.read(decoder, False)


def test_unknown_value_when_null(codec):
    encoder, decoder, _ = codec
    column = parse_enum("e", "Enum8('A'=1,'B'=2,'C'=3)")
    encoder.write_int8(0)
    assert column.read(decoder, True) == ""


def test_default_value_is_first_declared(codec):
    column = parse_enum("e", "Enum16('X'=5,'Y'=7)")
    assert column.default_value() == 5


def test_enum8_wrapping_value_round_trip(codec):
    encoder, decoder, _ = codec
    column = parse_enum("e", "Enum8('X'=200)")
    column.write(encoder, "X")
    assert column.read(decoder) == "X"


@pytest.mark.parametrize(
    "ch_type, message",
    [
        ("Enum8(", "invalid Enum format"),
        ("Enum32('A'=1)", "is not Enum type"),
        ("Enum8('A'1)", "invalid Enum format"),
        ("Enum8('A'=x)", "invalid Enum value"),
        ("Enum16('A'=40000)", "invalid Enum value"),
    ],
)
def test_parse_errors(ch_type, message):
    with pytest.raises(ValueError, match=message):
        parse_enum("e", ch_type)