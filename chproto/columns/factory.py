"""Builds column objects from server-side type names."""

from __future__ import annotations

import ipaddress
from datetime import datetime, tzinfo
from typing import Optional

from .array import Array
from .base import Column
from .dates import Date, DateTime, DateTime64
from .decimal import parse_decimal
from .enums import parse_enum
from .inet import IPv4, IPv6
from .nullable import Nullable
from .numeric import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    String,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from .uuid import UUID

_SIMPLE = {
    "Int8": Int8,
    "Int16": Int16,
    "Int32": Int32,
    "Int64": Int64,
    "UInt8": UInt8,
    "UInt16": UInt16,
    "UInt32": UInt32,
    "UInt64": UInt64,
    "Float32": Float32,
    "Float64": Float64,
    "String": String,
    "UUID": UUID,
    "IPv4": IPv4,
    "IPv6": IPv6,
}

_ARRAY_ELEMENT_TYPES = (
    int,
    float,
    str,
    datetime,
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
)


def _nested_type(ch_type: str, wrap_type: str) -> str:
    prefix = len(wrap_type) + 1
    if len(ch_type) > prefix + 1:
        nested = ch_type[prefix:-1].split(",")
        if len(nested) == 2:
            return nested[1].strip()
    raise ValueError(f"column: invalid {wrap_type} type ({ch_type})")


def _parse_array(name: str, ch_type: str, timezone: Optional[tzinfo]) -> Array:
    if len(ch_type) < 11:
        raise ValueError(f"invalid Array column type: {ch_type}")
    depth = 0
    inner = ch_type
    for piece in ch_type.split("Array("):
        if not piece:
            depth += 1
            continue
        inner = piece[: len(piece) - depth]
        break
    try:
        column = factory(name, inner, timezone)
    except ValueError as exc:
        raise ValueError(f"Array(T): {exc}") from exc
    if column.scan_type not in _ARRAY_ELEMENT_TYPES:
        scan = getattr(column.scan_type, "__name__", str(column.scan_type))
        raise ValueError(f"unsupported Array type '{scan}'")
    return Array(name, ch_type, depth, column)


def _parse_nullable(name: str, ch_type: str, timezone: Optional[tzinfo]) -> Nullable:
    if len(ch_type) < 14:
        raise ValueError(f"invalid Nullable column type: {ch_type}")
    try:
        column = factory(name, ch_type[9:-1], timezone)
    except ValueError as exc:
        raise ValueError(f"Nullable(T): {exc}") from exc
    return Nullable(name, ch_type, column)


def factory(name: str, ch_type: str, timezone: Optional[tzinfo] = None) -> Column:
    """Return the column for ``ch_type``; ``timezone`` None means local time."""
    simple = _SIMPLE.get(ch_type)
    if simple is not None:
        return simple(name, ch_type)
    if ch_type == "Date":
        return Date(name, ch_type, timezone)
    if ch_type.startswith("DateTime64"):
        return DateTime64(name, ch_type, timezone)
    if ch_type.startswith("DateTime"):
        return DateTime(name, "DateTime", timezone)
    if ch_type.startswith("Array"):
        return _parse_array(name, ch_type, timezone)
    if ch_type.startswith("Nullable"):
        return _parse_nullable(name, ch_type, timezone)
    if ch_type.startswith(("Enum8", "Enum16")):
        return parse_enum(name, ch_type)
    if ch_type.startswith("Decimal"):
        return parse_decimal(name, ch_type)
    if ch_type.startswith("SimpleAggregateFunction"):
        return factory(name, _nested_type(ch_type, "SimpleAggregateFunction"), timezone)
    raise ValueError(f"column: unhandled type {ch_type}")