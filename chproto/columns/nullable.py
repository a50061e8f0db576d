"""Nullable(T): a null mask followed by the values of the wrapped column."""

from __future__ import annotations

from typing import Any, List, Optional

from .base import Column


class Nullable(Column):
    """Wraps another column and carries a null flag per row."""

    def __init__(self, name: str, ch_type: str, column: Column) -> None:
        super().__init__(name, ch_type)
        self.column = column

    @property
    def scan_type(self) -> Any:  # type: ignore[override]
        return self.column.scan_type

    def default_value(self) -> Any:
        return self.column.default_value()

    def read(self, decoder: Any, is_null: bool = False) -> Any:
        return self.column.read(decoder, is_null)

    def write(self, encoder: Any, value: Any) -> None:
        """Emit nothing: nullable values go through :meth:`write_null`."""
        del encoder, value

    def read_null(self, decoder: Any, rows: int) -> List[Optional[Any]]:
        """Read ``rows`` null flags, then ``rows`` values; nulls become None."""
        nulls = [decoder.read_byte() for _ in range(rows)]
        values: List[Optional[Any]] = []
        for flag in nulls:
            value = self.column.read(decoder, flag != 0)
            values.append(None if flag else value)
        return values

    def write_null(self, nulls: Any, encoder: Any, value: Any) -> None:
        """Write the null flag to ``nulls`` and the value (or a default) to ``encoder``."""
        if value is None:
            nulls.write(b"\x01")
            self.column.write(encoder, self.column.default_value())
            return
        nulls.write(b"\x00")
        self.column.write(encoder, value)