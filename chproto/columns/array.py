"""Array(T) columns: per-level offsets followed by the flattened values."""

from __future__ import annotations

from typing import Any, List, Sequence

from .base import Column


class Array(Column):
    """An array column of ``depth`` nesting levels over an element column."""

    scan_type = list

    def __init__(self, name: str, ch_type: str, depth: int, column: Column) -> None:
        super().__init__(name, ch_type)
        self.depth = depth
        self.column = column

    def read(self, decoder: Any, is_null: bool = False) -> Any:
        raise TypeError("do not use read method for Array(T) column")

    def write(self, encoder: Any, value: Any) -> None:
        """Write one element through the element column."""
        self.column.write(encoder, value)

    def read_array(self, decoder: Any, rows: int) -> List[list]:
        """Read the offsets and values of ``rows`` arrays."""
        offsets: List[List[int]] = []
        count = rows
        for _ in range(self.depth):
            level = [decoder.read_uint64() for _ in range(count)]
            offsets.append(level)
            count = level[-1] if level else 0
        return [self._read(decoder, offsets, row, 0) for row in range(rows)]

    def _read(
        self, decoder: Any, offsets: Sequence[Sequence[int]], index: int, level: int
    ) -> list:
        end = offsets[level][index]
        start = offsets[level][index - 1] if index > 0 else 0
        if level == self.depth - 1:
            return [self.column.read(decoder, False) for _ in range(start, end)]
        return [self._read(decoder, offsets, i, level + 1) for i in range(start, end)]