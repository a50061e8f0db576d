"""IPv4 and IPv6 columns."""

from __future__ import annotations

import ipaddress
from typing import Any, Optional

from .base import Column, UnexpectedTypeError
from .ip import IP

_V4_MAPPED_PREFIX = b"\x00" * 10 + b"\xff\xff"


def _to16(value: Any) -> Optional[bytes]:
    """The 16-byte form of an address, or None if it is not one."""
    if isinstance(value, str):
        if not value or "%" in value:
            return None
        try:
            address = ipaddress.ip_address(value)
        except ValueError:
            return None
        return _to16(address)
    if isinstance(value, ipaddress.IPv4Address):
        return _V4_MAPPED_PREFIX + value.packed
    if isinstance(value, ipaddress.IPv6Address):
        return value.packed
    if isinstance(value, IP):
        return value.to_bytes() if len(value) in (4, 16) else None
    raise TypeError


class IPv4(Column):
    """IPv4 addresses stored as 4 little-endian bytes."""

    scan_type = ipaddress.IPv4Address

    def default_value(self) -> Any:
        return ipaddress.IPv4Address(0)

    def read(self, decoder: Any, is_null: bool = False) -> ipaddress.IPv4Address:
        raw = decoder.read_fixed(4)
        return ipaddress.IPv4Address(raw[::-1])

    def write(self, encoder: Any, value: Any) -> None:
        try:
            packed = _to16(value)
        except TypeError:
            raise UnexpectedTypeError(self, value) from None
        if packed is None or not packed.startswith(_V4_MAPPED_PREFIX):
            raise UnexpectedTypeError(self, value)
        encoder.write(packed[12:][::-1])


class IPv6(Column):
    """IPv6 addresses stored as 16 bytes; IPv4 is written as mapped."""

    scan_type = ipaddress.IPv6Address

    def default_value(self) -> Any:
        return ipaddress.IPv6Address(0)

    def read(self, decoder: Any, is_null: bool = False) -> ipaddress.IPv6Address:
        return ipaddress.IPv6Address(decoder.read_fixed(16))

    def write(self, encoder: Any, value: Any) -> None:
        try:
            packed = _to16(value)
        except TypeError:
            raise UnexpectedTypeError(self, value) from None
        if packed is None:
            raise UnexpectedTypeError(self, value)
        encoder.write(packed)