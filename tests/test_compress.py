import io
import random
import struct

import pytest

from chproto import lz4
from chproto.cityhash import city_hash128
from chproto.compress import (
    BLOCK_MAX_SIZE,
    CHECKSUM_SIZE,
    COMPRESS_HEADER_SIZE,
    HEADER_SIZE,
    CompressionError,
    CompressionMethod,
    CompressReader,
    CompressWriter,
)


def _compress(data: bytes) -> bytes:
    out = io.BytesIO()
    writer = CompressWriter(out)
    writer.write(data)
    writer.flush()
    return out.getvalue()


def _header(method: int, payload: bytes, size: int) -> bytes:
    return bytes(CHECKSUM_SIZE) + struct.pack(
        "<BII", method, len(payload) + COMPRESS_HEADER_SIZE, size
    )


def _sample(size: int) -> bytes:
    rng = random.Random(size)
    return bytes(rng.randrange(16) for _ in range(size))


def test_round_trip():
    data = _sample(5000)
    reader = CompressReader(io.BytesIO(_compress(data)))
    assert reader.read(len(data)) == data


def test_frame_layout():
    data = _sample(3000)
    frame = _compress(data)
    method, compressed_size, size = struct.unpack_from("<BII", frame, CHECKSUM_SIZE)
    assert method == CompressionMethod.LZ4
    assert compressed_size == len(frame) - CHECKSUM_SIZE
    assert size == len(data)
    assert frame[:CHECKSUM_SIZE] == city_hash128(frame[CHECKSUM_SIZE:]).to_bytes()
    assert lz4.decode(frame[HEADER_SIZE:], size) == data


def test_flush_without_data_writes_nothing():
    out = io.BytesIO()
    CompressWriter(out).flush()
    assert out.getvalue() == b""


def test_write_buffers_until_flush():
    out = io.BytesIO()
    writer = CompressWriter(out)
    assert writer.write(b"hello") == 5
    assert out.getvalue() == b""
    writer.flush()
    assert CompressReader(io.BytesIO(out.getvalue())).read(5) == b"hello"


def test_full_block_is_flushed_automatically():
    data = bytes(range(256)) * (BLOCK_MAX_SIZE // 256) + b"x" * 10
    out = io.BytesIO()
    writer = CompressWriter(out)
    assert writer.write(data) == len(data)
    first = out.getvalue()
    _, _, size = struct.unpack_from("<BII", first, CHECKSUM_SIZE)
    assert size == BLOCK_MAX_SIZE
    writer.flush()
    assert CompressReader(io.BytesIO(out.getvalue())).read(len(data)) == data


def test_read_in_pieces_across_blocks():
    first, second = _sample(700), _sample(900)
    stream = io.BytesIO(_compress(first) + _compress(second))
    reader = CompressReader(stream)
    data = first + second
    pieces = [reader.read(n) for n in (1, 250, 600, 749)]
    assert b"".join(pieces) == data


def test_read_zero_bytes():
    reader = CompressReader(io.BytesIO(b""))
    assert reader.read(0) == b""


def test_read_handcrafted_block():
    payload = b"\x40abcd"
    stream = io.BytesIO(_header(CompressionMethod.LZ4, payload, 4) + payload)
    assert CompressReader(stream).read(4) == b"abcd"


def test_unknown_method():
    payload = b"\x40abcd"
    stream = io.BytesIO(_header(CompressionMethod.ZSTD, payload, 4) + payload)
    with pytest.raises(CompressionError, match="unknown compression method"):
        CompressReader(stream).read(4)


def test_empty_stream():
    with pytest.raises(EOFError):
        CompressReader(io.BytesIO(b"")).read(1)


def test_short_header():
    with pytest.raises(CompressionError, match="header EOF"):
        CompressReader(io.BytesIO(bytes(HEADER_SIZE - 1))).read(1)


def test_truncated_payload():
    frame = _compress(_sample(2000))
    with pytest.raises(CompressionError, match="read size not match"):
        CompressReader(io.BytesIO(frame[:-3])).read(2000)


def test_corrupt_payload():
    payload = b"\xf0"
    stream = io.BytesIO(_header(CompressionMethod.LZ4, payload, 100) + payload)
    with pytest.raises(lz4.CorruptInputError):
        CompressReader(stream).read(1)


def test_flush_flushes_underlying_writer():
    class _Recorder(io.BytesIO):
        def __init__(self):
            super().__init__()
            self.flushes = 0

        def flush(self):
            self.flushes += 1

    out = _Recorder()
    writer = CompressWriter(out)
    writer.write(b"data")
    writer.flush()
    writer.flush()
    assert out.flushes == 1