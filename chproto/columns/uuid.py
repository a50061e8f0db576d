"""The UUID column: 16 bytes stored as two byte-reversed 64-bit halves."""

from __future__ import annotations

from typing import Any

from .base import Column, UnexpectedTypeError

UUID_LEN = 16
NULL_UUID = "00000000-0000-0000-0000-000000000000"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DASHES = (8, 13, 18, 23)
_PAIRS = (0, 2, 4, 6, 9, 11, 14, 16, 19, 21, 24, 26, 28, 30, 32, 34)


class InvalidUUIDFormatError(ValueError):
    """The text is not a UUID of the form 8-4-4-4-12 hex digits."""

    def __init__(self, message: str = "invalid UUID format") -> None:
        super().__init__(message)


def uuid_to_bytes(text: str) -> bytes:
    """Parse the textual UUID ``text``; the empty string is the null UUID."""
    if not text:
        text = NULL_UUID
    elif len(text) != 36:
        raise InvalidUUIDFormatError()
    if any(text[i] != "-" for i in _DASHES):
        raise InvalidUUIDFormatError()
    digits = "".join(text[x : x + 2] for x in _PAIRS)
    if not _HEX_DIGITS.issuperset(digits):
        raise InvalidUUIDFormatError()
    return bytes.fromhex(digits)


def bytes_to_uuid(raw: bytes) -> str:
    """Format 16 raw bytes as a textual UUID."""
    if len(raw) != UUID_LEN:
        raise ValueError(f"invalid UUID length: {len(raw)}")
    h = bytes(raw).hex()
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


def _swap(raw: bytes) -> bytes:
    return raw[:8][::-1] + raw[8:][::-1]


class UUID(Column):
    """A UUID column; values are read as text."""

    scan_type = str

    def read(self, decoder: Any, is_null: bool = False) -> str:
        return bytes_to_uuid(_swap(decoder.read_fixed(UUID_LEN)))

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, str):
            raw = uuid_to_bytes(value)
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            if len(raw) != UUID_LEN:
                raise ValueError(
                    f"invalid raw UUID len (expected {UUID_LEN}, got {len(raw)})"
                )
        else:
            raise UnexpectedTypeError(self, value)
        encoder.write(_swap(raw))