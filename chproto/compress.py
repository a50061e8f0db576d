"""Compressed block streams: LZ4 blocks with a CityHash128 checksum header."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import BinaryIO

from . import lz4
from .cityhash import city_hash128


class CompressionMethod(IntEnum):
    """Method byte stored in a compressed block header."""

    NONE = 0x02
    LZ4 = 0x82
    ZSTD = 0x90


CHECKSUM_SIZE = 16
COMPRESS_HEADER_SIZE = 1 + 4 + 4
HEADER_SIZE = CHECKSUM_SIZE + COMPRESS_HEADER_SIZE
BLOCK_MAX_SIZE = 1 << 20

_SIZES = struct.Struct("<BII")


class CompressionError(Exception):
    """A compressed block stream is malformed."""


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = reader.read(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


class CompressReader:
    """Reads uncompressed bytes from a stream of compressed blocks."""

    def __init__(self, reader: BinaryIO) -> None:
        self._reader = reader
        self._data = b""
        self._pos = 0

    def read(self, size: int) -> bytes:
        """Return exactly ``size`` bytes, decompressing blocks as needed."""
        if size < 0:
            raise ValueError("size must not be negative")
        out = bytearray(self._data[self._pos : self._pos + size])
        self._pos += len(out)
        while len(out) < size:
            self._read_block()
            take = size - len(out)
            out += self._data[:take]
            self._pos = min(take, len(self._data))
        return bytes(out)

    def _read_block(self) -> None:
        self._data = b""
        self._pos = 0
        header = _read_exact(self._reader, HEADER_SIZE)
        if not header:
            raise EOFError("end of compressed stream")
        if len(header) != HEADER_SIZE:
            raise CompressionError("lz4 decompression header EOF")

        method, compressed_size, decompressed_size = _SIZES.unpack_from(header, CHECKSUM_SIZE)
        compressed_size -= COMPRESS_HEADER_SIZE
        if method != CompressionMethod.LZ4:
            raise CompressionError(f"unknown compression method: 0x{method:02x}")
        if compressed_size < 0:
            raise CompressionError("invalid compressed block size")

        payload = _read_exact(self._reader, compressed_size)
        if compressed_size and not payload:
            raise EOFError("end of compressed stream")
        if len(payload) != compressed_size:
            raise CompressionError("decompress read size not match")
        self._data = lz4.decode(payload, decompressed_size)


class CompressWriter:
    """Buffers written bytes and emits them as checksummed LZ4 blocks."""

    def __init__(self, writer: BinaryIO) -> None:
        self._writer = writer
        self._data = bytearray()

    def write(self, data: bytes) -> int:
        """Buffer ``data``, emitting a block each time the buffer fills up."""
        view = memoryview(data).cast("B")
        written = 0
        while len(view):
            piece = view[: BLOCK_MAX_SIZE - len(self._data)]
            self._data += piece
            view = view[len(piece) :]
            if len(self._data) == BLOCK_MAX_SIZE:
                self.flush()
            written += len(piece)
        return written

    def flush(self) -> None:
        """Compress and write out whatever is buffered."""
        if not self._data:
            return
        compressed = lz4.encode(self._data)
        body = (
            _SIZES.pack(
                CompressionMethod.LZ4,
                len(compressed) + COMPRESS_HEADER_SIZE,
                len(self._data),
            )
            + compressed
        )
        checksum = city_hash128(body).to_bytes()
        self._writer.write(checksum + body)
        self._data = bytearray()
        flush = getattr(self._writer, "flush", None)
        if callable(flush):
            flush()