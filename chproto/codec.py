"""Little-endian primitive encoding for the native protocol, optionally compressed."""

from __future__ import annotations

import math
import struct
from typing import Any, Optional

from .compress import CompressReader, CompressWriter

MAX_VARINT_LEN64 = 10
_MASK64 = 0xFFFF_FFFF_FFFF_FFFF

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_I32 = struct.Struct("<i")
_I64 = struct.Struct("<q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")


class Encoder:
    """Writes protocol primitives to a binary stream.

    With ``compressed=True`` a compressing writer is kept alongside the plain
    output; :meth:`select_compress` switches between the two.
    """

    def __init__(self, output: Any, *, compressed: bool = False) -> None:
        self._output = output
        self._compress_output: Optional[CompressWriter] = (
            CompressWriter(output) if compressed else None
        )
        self._compress = False

    def select_compress(self, compress: bool) -> None:
        """Route writes through the compressor (if there is one) or not."""
        if self._compress_output is None:
            return
        if self._compress and not compress:
            self.flush()
        self._compress = compress

    @property
    def target(self) -> Any:
        """The stream that writes currently go to."""
        if self._compress and self._compress_output is not None:
            return self._compress_output
        return self._output

    def write(self, data: bytes) -> int:
        """Write raw bytes; returns how many were written."""
        written = self.target.write(data)
        return len(data) if written is None else written

    def flush(self) -> None:
        """Flush the current target if it can be flushed."""
        flush = getattr(self.target, "flush", None)
        if callable(flush):
            flush()

    def write_uvarint(self, value: int) -> None:
        """Write an unsigned LEB128 integer of at most 64 bits."""
        if value < 0 or value > _MASK64:
            raise ValueError(f"uvarint out of range: {value}")
        out = bytearray()
        while value >= 0x80:
            out.append((value & 0x7F) | 0x80)
            value >>= 7
        out.append(value)
        self.write(bytes(out))

    def write_bool(self, value: bool) -> None:
        self.write_uint8(1 if value else 0)

    def write_int8(self, value: int) -> None:
        self.write(_U8.pack(value & 0xFF))

    def write_int16(self, value: int) -> None:
        self.write(_U16.pack(value & 0xFFFF))

    def write_int32(self, value: int) -> None:
        self.write(_U32.pack(value & 0xFFFF_FFFF))

    def write_int64(self, value: int) -> None:
        self.write(_U64.pack(value & _MASK64))

    def write_uint8(self, value: int) -> None:
        self.write(_U8.pack(value & 0xFF))

    def write_uint16(self, value: int) -> None:
        self.write(_U16.pack(value & 0xFFFF))

    def write_uint32(self, value: int) -> None:
        self.write(_U32.pack(value & 0xFFFF_FFFF))

    def write_uint64(self, value: int) -> None:
        self.write(_U64.pack(value & _MASK64))

    def write_float32(self, value: float) -> None:
        try:
            packed = _F32.pack(value)
        except OverflowError:
            packed = _F32.pack(math.copysign(math.inf, value))
        self.write(packed)

    def write_float64(self, value: float) -> None:
        self.write(_F64.pack(value))

    def write_string(self, value: str) -> None:
        """Write a length-prefixed UTF-8 string."""
        self.write_raw_string(value.encode("utf-8", "surrogateescape"))

    def write_raw_string(self, value: bytes) -> None:
        """Write length-prefixed raw bytes."""
        self.write_uvarint(len(value))
        self.write(bytes(value))


class Decoder:
    """Reads protocol primitives from a binary stream.

    With ``compressed=True`` a decompressing reader is kept alongside the
    plain input; :meth:`select_compress` switches between the two.
    """

    def __init__(self, input: Any, *, compressed: bool = False) -> None:
        self._input = input
        self._compress_input: Optional[CompressReader] = (
            CompressReader(input) if compressed else None
        )
        self._compress = False

    def select_compress(self, compress: bool) -> None:
        """Read through the decompressor (if there is one) or not."""
        self._compress = compress

    @property
    def source(self) -> Any:
        """The stream that reads currently come from."""
        if self._compress and self._compress_input is not None:
            return self._compress_input
        return self._input

    def _read(self, size: int) -> bytes:
        source = self.source
        data = bytearray()
        while len(data) < size:
            chunk = source.read(size - len(data))
            if not chunk:
                raise EOFError("unexpected end of stream")
            data += chunk
        return bytes(data)

    def read_byte(self) -> int:
        return self._read(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() == 1

    def read_uvarint(self) -> int:
        """Read an unsigned LEB128 integer of at most 64 bits."""
        result = 0
        shift = 0
        for index in range(MAX_VARINT_LEN64):
            byte = self.read_byte()
            if byte < 0x80:
                if index == MAX_VARINT_LEN64 - 1 and byte > 1:
                    break
                return result | (byte << shift)
            result |= (byte & 0x7F) << shift
            shift += 7
        raise ValueError("varint overflows a 64-bit integer")

    def read_int8(self) -> int:
        return _I8.unpack(self._read(1))[0]

    def read_int16(self) -> int:
        return _I16.unpack(self._read(2))[0]

    def read_int32(self) -> int:
        return _I32.unpack(self._read(4))[0]

    def read_int64(self) -> int:
        return _I64.unpack(self._read(8))[0]

    def read_uint8(self) -> int:
        return self.read_byte()

    def read_uint16(self) -> int:
        return _U16.unpack(self._read(2))[0]

    def read_uint32(self) -> int:
        return _U32.unpack(self._read(4))[0]

    def read_uint64(self) -> int:
        return _U64.unpack(self._read(8))[0]

    def read_float32(self) -> float:
        return _F32.unpack(self._read(4))[0]

    def read_float64(self) -> float:
        return _F64.unpack(self._read(8))[0]

    def read_fixed(self, size: int) -> bytes:
        """Read exactly ``size`` raw bytes."""
        return self._read(size)

    def read_string(self) -> str:
        """Read a length-prefixed UTF-8 string."""
        length = self.read_uvarint()
        return self.read_fixed(length).decode("utf-8", "surrogateescape")