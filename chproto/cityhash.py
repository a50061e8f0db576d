"""CityHash v1.0.2 (64- and 128-bit), the variant used for block checksums."""

from __future__ import annotations

import struct
from typing import NamedTuple, Tuple

MASK64 = 0xFFFF_FFFF_FFFF_FFFF
_MASK32 = 0xFFFF_FFFF

K0 = 0xC3A5C85C97CB3127
K1 = 0xB492B66FBE98F273
K2 = 0x9AE16A3B2F90404F
K3 = 0xC949D7C7509E6557
K_MUL = 0x9DDFEA08EB382D69

_U64 = struct.Struct("<Q")
_U32 = struct.Struct("<I")
_U64_PAIR = struct.Struct("<QQ")

_Pair = Tuple[int, int]


class Uint128(NamedTuple):
    """A 128-bit hash value split into its lower and higher 64-bit halves."""

    low: int
    high: int

    def to_bytes(self) -> bytes:
        """Little-endian encoding: lower half first, then higher half."""
        return _U64_PAIR.pack(self.low, self.high)


def _fetch64(s: bytes, offset: int = 0) -> int:
    return _U64.unpack_from(s, offset)[0]


def _fetch32(s: bytes, offset: int = 0) -> int:
    return _U32.unpack_from(s, offset)[0]


def _rotate(value: int, shift: int) -> int:
    if shift == 0:
        return value
    return ((value >> shift) | (value << (64 - shift))) & MASK64


def _shift_mix(value: int) -> int:
    return value ^ (value >> 47)


def _hash_len16(u: int, v: int) -> int:
    a = ((u ^ v) * K_MUL) & MASK64
    a ^= a >> 47
    b = ((v ^ a) * K_MUL) & MASK64
    b ^= b >> 47
    return (b * K_MUL) & MASK64


def _hash_len0to16(s: bytes) -> int:
    n = len(s)
    if n > 8:
        a = _fetch64(s)
        b = _fetch64(s, n - 8)
        return _hash_len16(a, _rotate((b + n) & MASK64, n)) ^ b
    if n >= 4:
        a = _fetch32(s)
        return _hash_len16((n + (a << 3)) & MASK64, _fetch32(s, n - 4))
    if n > 0:
        y = (s[0] + (s[n >> 1] << 8)) & _MASK32
        z = (n + (s[n - 1] << 2)) & _MASK32
        return (_shift_mix(((y * K2) ^ (z * K3)) & MASK64) * K2) & MASK64
    return K2


def _hash_len17to32(s: bytes) -> int:
    n = len(s)
    a = (_fetch64(s) * K1) & MASK64
    b = _fetch64(s, 8)
    c = (_fetch64(s, n - 8) * K2) & MASK64
    d = (_fetch64(s, n - 16) * K0) & MASK64
    return _hash_len16(
        (_rotate((a - b) & MASK64, 43) + _rotate(c, 30) + d) & MASK64,
        (a + _rotate(b ^ K3, 20) - c + n) & MASK64,
    )


def _weak_hash32_with_seeds(w: int, x: int, y: int, z: int, a: int, b: int) -> _Pair:
    a = (a + w) & MASK64
    b = _rotate((b + a + z) & MASK64, 21)
    c = a
    a = (a + x + y) & MASK64
    b = (b + _rotate(a, 44)) & MASK64
    return (a + z) & MASK64, (b + c) & MASK64


def _weak_hash32_at(s: bytes, offset: int, a: int, b: int) -> _Pair:
    return _weak_hash32_with_seeds(
        _fetch64(s, offset),
        _fetch64(s, offset + 8),
        _fetch64(s, offset + 16),
        _fetch64(s, offset + 24),
        a,
        b,
    )


def _hash_len33to64(s: bytes) -> int:
    n = len(s)
    z = _fetch64(s, 24)
    a = (_fetch64(s) + (n + _fetch64(s, n - 16)) * K0) & MASK64
    b = _rotate((a + z) & MASK64, 52)
    c = _rotate(a, 37)
    a = (a + _fetch64(s, 8)) & MASK64
    c = (c + _rotate(a, 7)) & MASK64
    a = (a + _fetch64(s, 16)) & MASK64
    vf = (a + z) & MASK64
    vs = (b + _rotate(a, 31) + c) & MASK64

    a = (_fetch64(s, 16) + _fetch64(s, n - 32)) & MASK64
    z = _fetch64(s, n - 8)
    b = _rotate((a + z) & MASK64, 52)
    c = _rotate(a, 37)
    a = (a + _fetch64(s, n - 24)) & MASK64
    c = (c + _rotate(a, 7)) & MASK64
    a = (a + _fetch64(s, n - 16)) & MASK64

    wf = (a + z) & MASK64
    ws = (b + _rotate(a, 31) + c) & MASK64
    r = _shift_mix(((vf + ws) * K2 + (wf + vs) * K0) & MASK64)
    return (_shift_mix((r * K0 + vs) & MASK64) * K2) & MASK64


def _city_round(
    s: bytes, pos: int, x: int, y: int, z: int, v: _Pair, w: _Pair
) -> Tuple[int, int, int, _Pair, _Pair]:
    """One 64-byte step of the main loop; returns x, y, z already swapped."""
    x = (_rotate((x + y + v[0] + _fetch64(s, pos + 16)) & MASK64, 37) * K1) & MASK64
    y = (_rotate((y + v[1] + _fetch64(s, pos + 48)) & MASK64, 42) * K1) & MASK64
    x ^= w[1]
    y ^= v[0]
    z = _rotate(z ^ w[0], 33)
    v = _weak_hash32_at(s, pos, (v[1] * K1) & MASK64, (x + w[0]) & MASK64)
    w = _weak_hash32_at(s, pos + 32, (z + w[1]) & MASK64, y)
    return z, y, x, v, w


def city_hash64(data: bytes) -> int:
    """Return the 64-bit CityHash of ``data``."""
    s = bytes(data)
    n = len(s)
    if n <= 16:
        return _hash_len0to16(s)
    if n <= 32:
        return _hash_len17to32(s)
    if n <= 64:
        return _hash_len33to64(s)

    x = _fetch64(s)
    y = _fetch64(s, n - 16) ^ K1
    z = _fetch64(s, n - 56) ^ K0
    v = _weak_hash32_at(s, n - 64, n, y)
    w = _weak_hash32_at(s, n - 32, (n * K1) & MASK64, K0)

    z = (z + _shift_mix(v[1]) * K1) & MASK64
    x = (_rotate((z + x) & MASK64, 39) * K1) & MASK64
    y = (_rotate(y, 33) * K1) & MASK64

    remaining = (n - 1) & ~63
    pos = 0
    while True:
        x, y, z, v, w = _city_round(s, pos, x, y, z, v, w)
        pos += 64
        remaining -= 64
        if remaining == 0:
            break

    return _hash_len16(
        (_hash_len16(v[0], w[0]) + _shift_mix(y) * K1 + z) & MASK64,
        (_hash_len16(v[1], w[1]) + x) & MASK64,
    )


def city_hash64_with_seeds(data: bytes, seed0: int, seed1: int) -> int:
    """Return the 64-bit CityHash of ``data`` mixed with two seeds."""
    return _hash_len16((city_hash64(data) - seed0) & MASK64, seed1 & MASK64)


def city_hash64_with_seed(data: bytes, seed: int) -> int:
    """Return the 64-bit CityHash of ``data`` mixed with one seed."""
    return city_hash64_with_seeds(data, K2, seed)


def _city_murmur(s: bytes, seed: Uint128) -> Uint128:
    n = len(s)
    a, b = seed
    remaining = n - 16
    if remaining <= 0:
        a = (_shift_mix((a * K1) & MASK64) * K1) & MASK64
        c = (b * K1 + _hash_len0to16(s)) & MASK64
        d = _shift_mix((a + (_fetch64(s) if n >= 8 else c)) & MASK64)
    else:
        c = _hash_len16((_fetch64(s, n - 8) + K1) & MASK64, a)
        d = _hash_len16((b + n) & MASK64, (c + _fetch64(s, n - 16)) & MASK64)
        a = (a + d) & MASK64
        pos = 0
        while True:
            a ^= (_shift_mix((_fetch64(s, pos) * K1) & MASK64) * K1) & MASK64
            a = (a * K1) & MASK64
            b ^= a
            c ^= (_shift_mix((_fetch64(s, pos + 8) * K1) & MASK64) * K1) & MASK64
            c = (c * K1) & MASK64
            d ^= c
            pos += 16
            remaining -= 16
            if remaining <= 0:
                break
    a = _hash_len16(a, c)
    b = _hash_len16(d, b)
    return Uint128(a ^ b, _hash_len16(b, a))


def _city_hash128_with_seed(s: bytes, seed: Uint128) -> Uint128:
    n = len(s)
    if n < 128:
        return _city_murmur(s, seed)

    x, y = seed
    z = (n * K1) & MASK64
    v0 = (_rotate(y ^ K1, 49) * K1 + _fetch64(s)) & MASK64
    v1 = (_rotate(v0, 42) * K1 + _fetch64(s, 8)) & MASK64
    w0 = (_rotate((y + z) & MASK64, 35) * K1 + x) & MASK64
    w1 = (_rotate((x + _fetch64(s, 88)) & MASK64, 53) * K1) & MASK64
    v: _Pair = (v0, v1)
    w: _Pair = (w0, w1)

    pos = 0
    length = n
    while True:
        for _ in range(2):
            x, y, z, v, w = _city_round(s, pos, x, y, z, v, w)
            pos += 64
        length -= 128
        if length < 128:
            break

    y = (y + _rotate(w[0], 37) * K0 + z) & MASK64
    x = (x + _rotate((v[0] + z) & MASK64, 49) * K0) & MASK64

    tail_done = 0
    while tail_done < length:
        tail_done += 32
        y = (_rotate((y - x) & MASK64, 42) * K0 + v[1]) & MASK64
        w_low = (w[0] + _fetch64(s, pos + length - tail_done + 16)) & MASK64
        x = (_rotate(x, 49) * K0 + w_low) & MASK64
        w = ((w_low + v[0]) & MASK64, w[1])
        v = _weak_hash32_at(s, pos + length - tail_done, v[0], v[1])

    x = _hash_len16(x, v[0])
    y = _hash_len16(y, w[0])
    return Uint128(
        (_hash_len16((x + v[1]) & MASK64, w[1]) + y) & MASK64,
        _hash_len16((x + w[1]) & MASK64, (y + v[1]) & MASK64),
    )


def city_hash128_with_seed(data: bytes, seed: Tuple[int, int]) -> Uint128:
    """Return the 128-bit CityHash of ``data`` starting from ``seed``."""
    low, high = seed
    return _city_hash128_with_seed(bytes(data), Uint128(low & MASK64, high & MASK64))


def city_hash128(data: bytes) -> Uint128:
    """Return the 128-bit CityHash of ``data``."""
    s = bytes(data)
    n = len(s)
    if n >= 16:
        return _city_hash128_with_seed(s[16:], Uint128(_fetch64(s) ^ K3, _fetch64(s, 8)))
    if n >= 8:
        return _city_hash128_with_seed(
            b"",
            Uint128(_fetch64(s) ^ ((n * K0) & MASK64), _fetch64(s, n - 8) ^ K1),
        )
    return _city_hash128_with_seed(s, Uint128(K0, K1))


class City64:
    """Incremental 64-bit CityHash with a hashlib-like interface."""

    name = "cityhash64"
    digest_size = 8
    block_size = 1

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)

    def update(self, data: bytes) -> None:
        """Append ``data`` to the hashed input."""
        self._data += data

    def intdigest(self) -> int:
        """The hash of everything fed so far, as an integer."""
        return city_hash64(self._data)

    def digest(self) -> bytes:
        """The hash of everything fed so far, as 8 big-endian bytes."""
        return self.intdigest().to_bytes(8, "big")

    def reset(self) -> None:
        """Forget all input."""
        self._data.clear()