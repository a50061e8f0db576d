"""Enum8 and Enum16 columns: names stored as small integers."""

from __future__ import annotations

from typing import Any, Dict

from .base import Column, UnexpectedTypeError


def _wrap(value: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return (value + half) % (1 << bits) - half


class Enum(Column):
    """An enumeration column; values are read as their names."""

    scan_type = str

    def __init__(
        self, name: str, ch_type: str, values: Dict[str, int], is_enum16: bool = False
    ) -> None:
        super().__init__(name, ch_type)
        self.is_enum16 = is_enum16
        self.values = dict(values)
        self.names = {value: ident for ident, value in self.values.items()}
        self._first = next(iter(self.values.values()), 0)

    @property
    def bits(self) -> int:
        return 16 if self.is_enum16 else 8

    def read(self, decoder: Any, is_null: bool = False) -> str:
        value = decoder.read_int16() if self.is_enum16 else decoder.read_int8()
        ident = self.names.get(value)
        if ident is not None:
            return ident
        if is_null:
            return ""
        raise ValueError(f"invalid Enum value: {value}")

    def write(self, encoder: Any, value: Any) -> None:
        if isinstance(value, str):
            if value not in self.values:
                raise ValueError(f"invalid Enum ident: {value}")
            number = self.values[value]
        elif isinstance(value, int) and not isinstance(value, bool):
            bits = self.bits
            if not -(1 << (bits - 1)) <= value < (1 << bits):
                raise UnexpectedTypeError(self, value)
            number = value
        else:
            raise UnexpectedTypeError(self, value)
        if self.is_enum16:
            encoder.write_int16(number)
        else:
            encoder.write_int8(number)

    def default_value(self) -> Any:
        """The first declared value, written in place of a null."""
        return self._first


def parse_enum(name: str, ch_type: str) -> Enum:
    """Build an Enum column from a type such as ``Enum8('A'=1,'B'=2)``."""
    if len(ch_type) < 8:
        raise ValueError(f"invalid Enum format: {ch_type}")
    if ch_type.startswith("Enum8"):
        data, is_enum16 = ch_type[6:], False
    elif ch_type.startswith("Enum16"):
        data, is_enum16 = ch_type[7:], True
    else:
        raise ValueError(f"'{ch_type}' is not Enum type")

    values: Dict[str, int] = {}
    for block in data[:-1].split(","):
        parts = block.split("=")
        if len(parts) != 2:
            raise ValueError(f"invalid Enum format: {ch_type}")
        ident = parts[0].strip()
        try:
            number = int(parts[1].strip(), 10)
        except ValueError:
            raise ValueError(f"invalid Enum value: {ch_type}") from None
        if not -(2**15) <= number < 2**15:
            raise ValueError(f"invalid Enum value: {ch_type}")
        if not is_enum16:
            number = _wrap(number, 8)
        values[ident[1:-1]] = number
    return Enum(name, ch_type, values, is_enum16)