import io

import pytest

from chproto.writebuffer import (
    INITIAL_SIZE,
    BytePool,
    WriteBuffer,
    get_bytes,
    init_byte_pool,
    put_bytes,
)


@pytest.fixture(autouse=True)
def _fresh_pool():
    init_byte_pool(0)
    yield
    init_byte_pool(0)


def test_write_buffer_safe_with_leaky_pool():
    init_byte_pool(1)
    wb = WriteBuffer(INITIAL_SIZE)

    assert wb.write(bytes(1)) == 1

    put_bytes(bytearray(INITIAL_SIZE))

    assert wb.write(bytes(INITIAL_SIZE + 1)) == INITIAL_SIZE + 1
    assert len(wb) == INITIAL_SIZE + 2
    assert wb.getvalue() == bytes(INITIAL_SIZE + 2)


def test_growth_keeps_order():
    wb = WriteBuffer(16)
    parts = [bytes([i]) * 100 for i in range(10)]
    for part in parts:
        assert wb.write(part) == 100
    assert wb.getvalue() == b"".join(parts)
    assert len(wb) == 1000


def test_write_to_drains_buffer():
    wb = WriteBuffer(8)
    payload = bytes(range(200))
    wb.write(payload)
    out = io.BytesIO()
    assert wb.write_to(out) == len(payload)
    assert out.getvalue() == payload
    assert wb.getvalue() == b""
    wb.write(b"again")
    assert wb.getvalue() == b"again"


class _BrokenWriter:
    def write(self, data):
        raise OSError("broken")


def test_write_to_failure_clears_and_raises():
    wb = WriteBuffer(8)
    wb.write(b"x" * 50)
    with pytest.raises(OSError):
        wb.write_to(_BrokenWriter())
    assert wb.getvalue() == b""


def test_reset_returns_chunks_to_pool():
    init_byte_pool(4)
    wb = WriteBuffer(64)
    wb.write(bytes(200))
    wb.reset()
    assert len(get_bytes(0, 1)) == 64
    assert wb.getvalue() == b""
    wb.write(b"abc")
    assert wb.getvalue() == b"abc"


def test_byte_pool_reuses_buffer():
    pool = BytePool(1)
    buf = bytearray(10)
    pool.put(buf)
    assert pool.get(0, 100) is buf
    fresh = pool.get(0, 100)
    assert fresh is not buf and len(fresh) == 100


def test_byte_pool_drops_when_full():
    pool = BytePool(1)
    pool.put(bytearray(1))
    pool.put(bytearray(2))
    assert len(pool) == 1
    assert len(pool.get(0, 5)) == 1


def test_zero_sized_pool_never_stores():
    pool = BytePool(0)
    pool.put(bytearray(3))
    assert len(pool) == 0
    assert len(pool.get(4, 2)) == 4