"""Decimal(P, S) columns held as scaled 32- or 64-bit integers."""

from __future__ import annotations

import re
from typing import Any

from .base import Column, UnexpectedTypeError

_INTEGER = re.compile(r"[+-]?\d+")
_BOUNDS = {
    32: (-(2**31), 2**31 - 1),
    64: (-(2**63), 2**63 - 1),
}


class Decimal(Column):
    """A Decimal column; values are read as the raw scaled integer.

    Integers are written unchanged; floats are multiplied by ``10**scale``
    and truncated.
    """

    scan_type = int

    def __init__(self, name: str, ch_type: str, precision: int, scale: int) -> None:
        super().__init__(name, ch_type)
        self.precision = precision
        self.scale = scale
        self.nobits = 32 if precision <= 9 else 64

    def read(self, decoder: Any, is_null: bool = False) -> int:
        if self.nobits == 32:
            return decoder.read_int32()
        return decoder.read_int64()

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UnexpectedTypeError(self, value)
        if isinstance(value, float):
            fixed = int(value * 10.0**self.scale)
        else:
            low, high = _BOUNDS[self.nobits]
            if not low <= value <= high:
                raise ValueError(
                    f"narrowing type conversion from int to int{self.nobits}"
                )
            fixed = value
        if self.nobits == 32:
            encoder.write_int32(fixed)
        else:
            encoder.write_int64(fixed)


def _parse_param(text: str, ch_type: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"'{ch_type}' is not Decimal type: invalid syntax {text!r}")
    return int(text)


def parse_decimal(name: str, ch_type: str) -> Decimal:
    """Build a Decimal column from a type such as ``Decimal(18, 5)``."""
    if (
        len(ch_type) < 12
        or not ch_type.startswith("Decimal")
        or ch_type[7] != "("
        or ch_type[-1] != ")"
    ):
        raise ValueError(f"invalid Decimal format: '{ch_type}'")

    params = ch_type[8:-1].split(",")
    if len(params) != 2:
        raise ValueError(f"invalid Decimal format: '{ch_type}'")

    precision = _parse_param(params[0].strip(), ch_type)
    if precision < 1:
        raise ValueError("wrong precision of Decimal type")
    scale = _parse_param(params[1].strip(), ch_type)
    if scale < 0 or scale > precision:
        raise ValueError("wrong scale of Decimal type")

    if precision <= 18:
        return Decimal(name, ch_type, precision, scale)
    if precision <= 38:
        raise ValueError("Decimal128 is not supported")
    raise ValueError("precision of Decimal exceeds max bound")