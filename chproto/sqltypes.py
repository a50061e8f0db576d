"""Query parameter types that drop time zones or carry UUIDs as raw bytes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from .columns.uuid import InvalidUUIDFormatError, bytes_to_uuid, uuid_to_bytes


@dataclass(frozen=True)
class Date:
    """A date whose wall-clock day is kept and whose time zone is dropped."""

    moment: date

    def value(self) -> datetime:
        """Midnight UTC on the same calendar day."""
        m = self.moment
        return datetime(m.year, m.month, m.day, tzinfo=timezone.utc)


@dataclass(frozen=True)
class DateTime:
    """A moment whose wall-clock time is kept and whose time zone is dropped."""

    moment: date

    def value(self) -> datetime:
        """The same wall-clock time in UTC, to the second."""
        m = self.moment
        return datetime(
            m.year,
            m.month,
            m.day,
            getattr(m, "hour", 0),
            getattr(m, "minute", 0),
            getattr(m, "second", 0),
            tzinfo=timezone.utc,
        )


def _parse(text: str) -> bytes:
    if len(text) < 36:
        raise InvalidUUIDFormatError()
    return uuid_to_bytes(text[:36])


class UUID(str):
    """A textual UUID sent as 16 raw bytes."""

    def value(self) -> bytes:
        return self.to_bytes()

    def to_bytes(self) -> bytes:
        """The 16 bytes the text stands for."""
        return _parse(str(self))

    @classmethod
    def scan(cls, value: Any) -> "UUID":
        """Build a UUID from 16 raw bytes (given as bytes or a string)."""
        if isinstance(value, str):
            raw = value.encode("utf-8", "surrogateescape")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
        else:
            raw = b""
        if len(raw) != 16:
            raise ValueError(f"invalid UUID length: {len(raw)}")
        return cls(bytes_to_uuid(raw))