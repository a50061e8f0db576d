"""IP addresses stored as 16 raw bytes, right-aligned."""

from __future__ import annotations

import ipaddress
from typing import Any, Optional

_V4_MAPPED_PREFIX = b"\x00" * 10 + b"\xff\xff"


class IP:
    """An IP address held as its raw 4- or 16-byte form."""

    __slots__ = ("_packed",)

    def __init__(self, packed: bytes = b"") -> None:
        self._packed = bytes(packed)

    @property
    def packed(self) -> bytes:
        """The raw address bytes as given."""
        return self._packed

    def to_bytes(self) -> bytes:
        """The address right-aligned in 16 bytes; IPv4 gets the mapped prefix."""
        n = len(self._packed)
        if n < 16:
            buf = bytearray(16)
            buf[16 - n :] = self._packed
            if n == 4:
                buf[10] = 0xFF
                buf[11] = 0xFF
            return bytes(buf)
        return self._packed

    def value(self) -> bytes:
        """The value to send as a query parameter."""
        return self.to_bytes()

    @classmethod
    def scan(cls, value: Any) -> "IP":
        """Build an IP from raw bytes, a textual address or another address."""
        if isinstance(value, IP):
            return cls(value.packed)
        if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return cls(value.packed)
        if isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) in (4, 16):
                return cls(raw)
            raise ValueError("invalid scan value")
        if isinstance(value, str):
            if not value:
                raise ValueError("invalid scan value")
            raw = value.encode("utf-8")
            if len(raw) in (4, 16) and "." not in value and ":" not in value:
                return cls(raw)
            try:
                if ":" in value:
                    return cls(ipaddress.IPv6Address(value).packed)
                return cls(ipaddress.IPv4Address(value).packed)
            except ipaddress.AddressValueError as exc:
                raise ValueError("invalid scan value") from exc
        raise TypeError("invalid scan type")

    def _as16(self) -> Optional[bytes]:
        if len(self._packed) == 4:
            return _V4_MAPPED_PREFIX + self._packed
        if len(self._packed) == 16:
            return self._packed
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IP):
            return NotImplemented
        mine, theirs = self._as16(), other._as16()
        if mine is not None and theirs is not None:
            return mine == theirs
        return self._packed == other._packed

    def __hash__(self) -> int:
        normalized = self._as16()
        return hash(normalized if normalized is not None else self._packed)

    def __bytes__(self) -> bytes:
        return self._packed

    def __len__(self) -> int:
        return len(self._packed)

    def __str__(self) -> str:
        if not self._packed:
            return "<nil>"
        normalized = self._as16()
        if normalized is None:
            return "?" + self._packed.hex()
        if normalized.startswith(_V4_MAPPED_PREFIX):
            return str(ipaddress.IPv4Address(normalized[12:]))
        return str(ipaddress.IPv6Address(normalized))

    def __repr__(self) -> str:
        return f"IP({str(self)!r})"