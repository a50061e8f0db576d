"""Fixed-width integer, floating-point and String columns."""

from __future__ import annotations

from typing import Any, Callable

from .base import Column, UnexpectedTypeError

_RAW = (bytes, bytearray, memoryview)


class _Integer(Column):
    """An integer column; values wrap to the column's width like a cast."""

    scan_type = int
    _accepts_bool = False
    _accepts_raw = False

    def _encode(self, encoder: Any, write: Callable[[int], Any], value: Any) -> None:
        if isinstance(value, bool):
            if not self._accepts_bool:
                raise UnexpectedTypeError(self, value)
            write(int(value))
        elif isinstance(value, int):
            write(value)
        elif self._accepts_raw and isinstance(value, _RAW):
            encoder.write(bytes(value))
        else:
            raise UnexpectedTypeError(self, value)


class Int8(_Integer):
    """Int8; also accepts booleans as 1 and 0."""

    _accepts_bool = True

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_int8()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_int8, value)


class Int16(_Integer):
    """Int16."""

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_int16()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_int16, value)


class Int32(_Integer):
    """Int32."""

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_int32()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_int32, value)


class Int64(_Integer):
    """Int64; raw bytes are written through unchanged."""

    _accepts_raw = True

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_int64()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_int64, value)


class UInt8(_Integer):
    """UInt8; also accepts booleans as 1 and 0."""

    _accepts_bool = True

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_uint8()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_uint8, value)


class UInt16(_Integer):
    """UInt16."""

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_uint16()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_uint16, value)


class UInt32(_Integer):
    """UInt32."""

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_uint32()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_uint32, value)


class UInt64(_Integer):
    """UInt64; raw bytes are written through unchanged."""

    _accepts_raw = True

    def read(self, decoder: Any, is_null: bool = False) -> int:
        return decoder.read_uint64()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder, encoder.write_uint64, value)


class _Floating(Column):
    scan_type = float

    def _encode(self, write: Callable[[float], Any], value: Any) -> None:
        if not isinstance(value, float):
            raise UnexpectedTypeError(self, value)
        write(value)


class Float32(_Floating):
    """Float32; values are rounded to single precision."""

    def read(self, decoder: Any, is_null: bool = False) -> float:
        return decoder.read_float32()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder.write_float32, value)


class Float64(_Floating):
    """Float64."""

    def read(self, decoder: Any, is_null: bool = False) -> float:
        return decoder.read_float64()

    def write(self, encoder: Any, value: Any) -> None:
        self._encode(encoder.write_float64, value)


class String(Column):
    """A length-prefixed String column; text or raw bytes may be written."""

    scan_type = str

    def read(self, decoder: Any, is_null: bool = False) -> str:
        return decoder.read_string()

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, str):
            encoder.write_string(value)
        elif isinstance(value, _RAW):
            encoder.write_raw_string(bytes(value))
        else:
            raise UnexpectedTypeError(self, value)