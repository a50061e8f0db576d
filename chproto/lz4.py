"""LZ4 block format: raw blocks without frame headers or length prefixes."""

from __future__ import annotations

import struct
from typing import Union

MIN_MATCH = 4
HASH_LOG = 16
HASH_TABLE_SIZE = 1 << HASH_LOG
MAX_INPUT_SIZE = 0x7E000000

_HASH_SHIFT = MIN_MATCH * 8 - HASH_LOG
_INCOMPRESSIBLE = 128
_UNINIT_HASH = 0x88888888
_ML_BITS = 4
_ML_MASK = (1 << _ML_BITS) - 1
_RUN_MASK = (1 << (8 - _ML_BITS)) - 1
_M32 = 0xFFFFFFFF
_DECR = (0, 3, 2, 3)
_U32 = struct.Struct("<I")

Buffer = Union[bytes, bytearray, memoryview]


class CorruptInputError(ValueError):
    """The compressed input is not a valid LZ4 block."""

    def __init__(self, message: str = "corrupt input") -> None:
        super().__init__(message)


class InputTooLargeError(ValueError):
    """The input is too large to be compressed as one block."""

    def __init__(self, message: str = "input too large") -> None:
        super().__init__(message)


def compress_bound(size: int) -> int:
    """The largest possible size of a compressed block for ``size`` input bytes."""
    if size > MAX_INPUT_SIZE:
        return 0
    return size + size // 255 + 16


def _write_literals(dst: bytearray, src: bytes, start: int, length: int, match_len: int) -> None:
    code = _RUN_MASK if length > _RUN_MASK - 1 else length
    dst.append((code << _ML_BITS) + (_ML_MASK if match_len > _ML_MASK - 1 else match_len))
    if code == _RUN_MASK:
        rest = length - _RUN_MASK
        while rest > 254:
            dst.append(255)
            rest -= 255
        dst.append(rest)
    dst += src[start : start + length]


def encode(src: Buffer) -> bytes:
    """Compress ``src`` into a single LZ4 block."""
    if len(src) >= MAX_INPUT_SIZE:
        raise InputTooLargeError()
    src = bytes(src)
    n = len(src)
    dst = bytearray()
    table = [0] * HASH_TABLE_SIZE
    unpack = _U32.unpack_from

    pos = anchor = 0
    step = 1
    limit = _INCOMPRESSIBLE

    while True:
        if pos + 12 >= n:
            _write_literals(dst, src, anchor, n - anchor, 0)
            return bytes(dst)

        sequence = unpack(src, pos)[0]
        slot = ((sequence * 2654435761) & _M32) >> _HASH_SHIFT
        ref = (table[slot] + _UNINIT_HASH) & _M32
        table[slot] = (pos - _UNINIT_HASH) & _M32

        if ((pos - ref) & _M32) >> 16 or unpack(src, ref)[0] != sequence:
            if pos - anchor > limit:
                limit = (limit << 1) & _M32
                step += 1 + (step >> 2)
            pos += step
            continue

        if step > 1:
            table[slot] = (ref - _UNINIT_HASH) & _M32
            pos -= step - 1
            step = 1
            continue
        limit = _INCOMPRESSIBLE

        literal_len = pos - anchor
        back = pos - ref
        start = anchor

        pos += MIN_MATCH
        ref += MIN_MATCH
        anchor = pos

        while pos < n - 5 and src[pos] == src[ref]:
            pos += 1
            ref += 1

        match_len = pos - anchor
        _write_literals(dst, src, start, literal_len, match_len)
        dst.append(back & 0xFF)
        dst.append((back >> 8) & 0xFF)

        if match_len > _ML_MASK - 1:
            match_len -= _ML_MASK
            while match_len > 254:
                match_len -= 255
                dst.append(255)
            dst.append(match_len)

        anchor = pos


class _BlockDecoder:
    def __init__(self, src: bytes, size: int) -> None:
        self.src = src
        self.dst = bytearray(size)
        self.spos = 0
        self.dpos = 0
        self.ref = 0

    def read_length(self) -> int:
        length = 0
        while True:
            if self.spos >= len(self.src):
                raise CorruptInputError()
            byte = self.src[self.spos]
            self.spos += 1
            length += byte
            if byte != 255:
                return length

    def copy(self, length: int, decr: int) -> None:
        dst, ref, dpos = self.dst, self.ref, self.dpos
        if ref + length < dpos:
            dst[dpos : dpos + length] = dst[ref : ref + length]
        else:
            distance = dpos - ref
            if distance > 0:
                pattern = bytes(dst[ref:dpos])
                repeats = -(-length // distance)
                dst[dpos : dpos + length] = (pattern * repeats)[:length]
        self.dpos += length
        self.ref += length - decr

    def run(self) -> bytes:
        src, dst = self.src, self.dst
        while True:
            if self.spos == len(src):
                return bytes(dst)
            code = src[self.spos]
            self.spos += 1

            length = code >> _ML_BITS
            if length == _RUN_MASK:
                length += self.read_length()

            if self.spos + length > len(src) or self.dpos + length > len(dst):
                raise CorruptInputError()
            dst[self.dpos : self.dpos + length] = src[self.spos : self.spos + length]
            self.spos += length
            self.dpos += length

            if self.spos == len(src):
                return bytes(dst)
            if self.spos + 2 >= len(src):
                raise CorruptInputError()

            back = src[self.spos] | (src[self.spos + 1] << 8)
            if back > self.dpos:
                raise CorruptInputError()
            self.spos += 2
            self.ref = self.dpos - back

            length = code & _ML_MASK
            if length == _ML_MASK:
                length += self.read_length()

            literal = self.dpos - self.ref
            if literal < 4:
                if self.dpos + 4 > len(dst):
                    raise CorruptInputError()
                self.copy(4, _DECR[literal])
            else:
                length += 4

            if self.dpos + length > len(dst):
                raise CorruptInputError()
            self.copy(length, 0)


def decode(src: Buffer, size: int) -> bytes:
    """Decompress the LZ4 block ``src`` into a buffer of ``size`` bytes."""
    return _BlockDecoder(bytes(src), size).run()