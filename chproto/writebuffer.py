"""A chunked, growing write buffer backed by a bounded pool of byte buffers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import BinaryIO, Deque, List

INITIAL_SIZE = 256 * 1024
_MIN_CHUNK = 64


class BytePool:
    """A bounded pool of reusable bytearrays; extras are simply dropped."""

    def __init__(self, size: int = 0) -> None:
        self._size = size
        self._items: Deque[bytearray] = deque()
        self._lock = threading.Lock()

    def get(self, size: int, capacity: int) -> bytearray:
        """Return a pooled buffer, or a new one of ``max(size, capacity)`` bytes."""
        with self._lock:
            if self._items:
                return self._items.popleft()
        return bytearray(max(size, capacity))

    def put(self, chunk: bytearray) -> None:
        """Offer ``chunk`` back to the pool; it is dropped if the pool is full."""
        with self._lock:
            if len(self._items) < self._size:
                self._items.append(chunk)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


_pool = BytePool(0)


def init_byte_pool(size: int) -> None:
    """Replace the shared pool with an empty one holding up to ``size`` buffers."""
    global _pool
    _pool = BytePool(size)


def get_bytes(size: int, capacity: int) -> bytearray:
    """Take a buffer from the shared pool, or allocate one."""
    return _pool.get(size, capacity)


def put_bytes(chunk: bytearray) -> None:
    """Return a buffer to the shared pool."""
    _pool.put(chunk)


@dataclass
class _Chunk:
    buf: bytearray
    used: int = 0

    @property
    def capacity(self) -> int:
        return len(self.buf)

    @property
    def free(self) -> int:
        return len(self.buf) - self.used

    def view(self) -> bytes:
        return bytes(self.buf[: self.used])


class WriteBuffer:
    """Accumulates written bytes in chunks that double in size as they fill."""

    def __init__(self, initial_size: int = INITIAL_SIZE) -> None:
        self._chunks: List[_Chunk] = []
        self._add_chunk(0, initial_size)

    def write(self, data: bytes) -> int:
        """Append ``data``; returns the number of bytes written."""
        view = memoryview(data).cast("B")
        total = len(view)
        if not self._chunks:
            self._add_chunk(0, self._calc_capacity(total))
        while True:
            chunk = self._chunks[-1]
            free = chunk.free
            if free >= len(view):
                chunk.buf[chunk.used : chunk.used + len(view)] = view
                chunk.used += len(view)
                return total
            chunk.buf[chunk.used : chunk.used + free] = view[:free]
            chunk.used += free
            view = view[free:]
            self._add_chunk(0, self._calc_capacity(len(view)))

    def write_to(self, writer: BinaryIO) -> int:
        """Write all buffered bytes to ``writer`` and empty the buffer."""
        size = 0
        try:
            for chunk in self._chunks:
                data = chunk.view()
                written = writer.write(data)
                size += len(data) if written is None else written
        finally:
            self._clear()
        return size

    def getvalue(self) -> bytes:
        """All buffered bytes, in order."""
        return b"".join(chunk.view() for chunk in self._chunks)

    def reset(self) -> None:
        """Return every chunk to the shared pool and drop them."""
        for chunk in self._chunks:
            put_bytes(chunk.buf)
        self._chunks = []

    def __len__(self) -> int:
        return sum(chunk.used for chunk in self._chunks)

    def _add_chunk(self, size: int, capacity: int) -> None:
        buf = get_bytes(size, capacity)
        self._chunks.append(_Chunk(buf, size if len(buf) >= size else 0))

    def _calc_capacity(self, data_size: int) -> int:
        data_size = max(data_size, _MIN_CHUNK)
        if not self._chunks:
            return data_size
        return max(data_size, self._chunks[-1].capacity * 2)

    def _clear(self) -> None:
        if not self._chunks:
            return
        threshold = self._chunks[0].capacity
        for chunk in self._chunks[:-1]:
            if chunk.capacity >= threshold:
                put_bytes(chunk.buf)
            else:
                threshold = chunk.capacity
        last = self._chunks[-1]
        last.used = 0
        self._chunks = [last]