"""Data blocks: a set of columns with their row values, in columnar wire form."""

from __future__ import annotations

import io
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Any, Iterable, List, Optional, Sequence

from .codec import Encoder
from .columns.array import Array
from .columns.base import Column
from .columns.factory import factory
from .columns.nullable import Nullable

_SEQUENCES = (list, tuple, bytes, bytearray)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_DATE = date(1970, 1, 1)
_SECONDS_PER_DAY = 24 * 3600


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return value.astimezone()
    return value


def _unix_seconds(value: datetime) -> int:
    delta = _aware(value) - _EPOCH
    return delta.days * _SECONDS_PER_DAY + delta.seconds


@dataclass
class _BlockInfo:
    num1: int = 0
    is_overflows: bool = False
    num2: int = 0
    bucket_num: int = 0
    num3: int = 0

    def read(self, decoder: Any) -> None:
        self.num1 = decoder.read_uvarint()
        self.is_overflows = decoder.read_bool()
        self.num2 = decoder.read_uvarint()
        self.bucket_num = decoder.read_int32()
        self.num3 = decoder.read_uvarint()

    def write(self, encoder: Any) -> None:
        encoder.write_uvarint(1)
        encoder.write_bool(self.is_overflows)
        encoder.write_uvarint(2)
        if self.bucket_num == 0:
            self.bucket_num = -1
        encoder.write_int32(self.bucket_num)
        encoder.write_uvarint(0)


class _ColumnBuffer:
    """Null-mask/offset bytes and value bytes accumulated for one column."""

    def __init__(self) -> None:
        self._offsets = io.BytesIO()
        self._values = io.BytesIO()
        self.offset = Encoder(self._offsets)
        self.column = Encoder(self._values)

    def write_to(self, writer: Any) -> int:
        size = 0
        for buf in (self._offsets, self._values):
            data = buf.getvalue()
            if data:
                writer.write(data)
            size += len(data)
            buf.seek(0)
            buf.truncate()
        return size

    def reset(self) -> None:
        for buf in (self._offsets, self._values):
            buf.seek(0)
            buf.truncate()


class Block:
    """Columns and the rows read into or appended to them."""

    def __init__(self, columns: Optional[Iterable[Column]] = None) -> None:
        self.columns: List[Column] = list(columns or [])
        self.values: List[list] = []
        self.num_rows = 0
        self.num_columns = len(self.columns)
        self._offsets: List[List[List[int]]] = []
        self._buffers: List[_ColumnBuffer] = []
        self._info = _BlockInfo()

    def copy(self) -> "Block":
        """A new empty block with the same columns and block info."""
        block = Block(self.columns)
        block.num_columns = self.num_columns
        block._info = replace(self._info)
        return block

    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def read(self, server_info: Any, decoder: Any) -> None:
        """Read a whole block, building its columns from the type names sent."""
        self._info.read(decoder)
        self.num_columns = decoder.read_uvarint()
        self.num_rows = decoder.read_uvarint()
        self.values = []
        rows = self.num_rows
        for _ in range(self.num_columns):
            name = decoder.read_string()
            ch_type = decoder.read_string()
            column = factory(name, ch_type, server_info.timezone)
            self.columns.append(column)
            if isinstance(column, Array):
                values = column.read_array(decoder, rows)
            elif isinstance(column, Nullable):
                values = column.read_null(decoder, rows)
            else:
                values = [column.read(decoder, False) for _ in range(rows)]
            self.values.append(values)

    def _write_array(self, column: Column, value: Any, num: int, level: int) -> None:
        target = self._buffers[num].column
        if level > column.depth:
            column.write(target, value)
            return
        if isinstance(value, _SEQUENCES):
            levels = self._offsets[num]
            if len(levels) < level:
                levels.append([len(value)])
            else:
                current = levels[level - 1]
                current.append(current[-1] + len(value))
            for item in value:
                self._write_array(column, item, num, level + 1)
        else:
            column.write(target, value)

    def append_row(self, args: Sequence[Any]) -> None:
        """Encode one row, one value per column."""
        if len(self.columns) != len(args):
            raise ValueError(
                f"block: expected {len(self.columns)} arguments "
                f"(columns: {', '.join(self.column_names())}), got {len(args)}"
            )
        self.reserve()
        self.num_rows += 1
        for num, (column, value) in enumerate(zip(self.columns, args)):
            buffer = self._buffers[num]
            if isinstance(column, Array):
                if not isinstance(value, _SEQUENCES):
                    raise TypeError(
                        f"unsupported Array(T) type [{type(value).__name__}]"
                    )
                self._write_array(column, value, num, 1)
            elif isinstance(column, Nullable):
                column.write_null(buffer.offset, buffer.column, value)
            else:
                column.write(buffer.column, value)

    def reserve(self) -> None:
        """Create the per-column buffers if they do not exist yet."""
        if not self._buffers:
            self._buffers = [_ColumnBuffer() for _ in self.columns]
            self._offsets = [[] for _ in self.columns]

    def reset(self) -> None:
        """Drop all encoded rows and buffers."""
        self.num_rows = 0
        self.num_columns = 0
        for buffer in self._buffers:
            buffer.reset()
        self._offsets = []
        self._buffers = []

    def write(self, server_info: Any, encoder: Any) -> None:
        """Write the block header, the column headers and the encoded rows."""
        del server_info
        self._info.write(encoder)
        encoder.write_uvarint(self.num_columns)
        encoder.write_uvarint(self.num_rows)
        try:
            for i, column in enumerate(self.columns):
                encoder.write_string(column.name)
                encoder.write_string(column.ch_type)
                if len(self._buffers) == len(self.columns):
                    for level in self._offsets[i]:
                        for offset in level:
                            encoder.write_uint64(offset)
                    self._buffers[i].write_to(encoder)
        finally:
            self.num_rows = 0
            self._offsets = [[] for _ in self._offsets]

    def write_date(self, c: int, value: date) -> None:
        """Write a day count (wall-clock date of ``value``) as UInt16."""
        if isinstance(value, datetime):
            aware = _aware(value)
            offset = aware.utcoffset()
            seconds = _unix_seconds(aware) + int(offset.total_seconds())
        elif isinstance(value, date):
            seconds = (value - _EPOCH_DATE).days * _SECONDS_PER_DAY
        else:
            raise TypeError(f"unsupported Date type [{type(value).__name__}]")
        self._buffers[c].column.write_uint16(_trunc_div(seconds, _SECONDS_PER_DAY))

    def write_datetime(self, c: int, value: datetime) -> None:
        """Write Unix seconds as UInt32."""
        self._buffers[c].column.write_uint32(_unix_seconds(value))

    def write_bool(self, c: int, value: bool) -> None:
        self._buffers[c].column.write_uint8(1 if value else 0)

    def write_int8(self, c: int, value: int) -> None:
        self._buffers[c].column.write_int8(value)

    def write_int16(self, c: int, value: int) -> None:
        self._buffers[c].column.write_int16(value)

    def write_int32(self, c: int, value: int) -> None:
        self._buffers[c].column.write_int32(value)

    def write_int64(self, c: int, value: int) -> None:
        self._buffers[c].column.write_int64(value)

    def write_uint8(self, c: int, value: int) -> None:
        self._buffers[c].column.write_uint8(value)

    def write_uint16(self, c: int, value: int) -> None:
        self._buffers[c].column.write_uint16(value)

    def write_uint32(self, c: int, value: int) -> None:
        self._buffers[c].column.write_uint32(value)

    def write_uint64(self, c: int, value: int) -> None:
        self._buffers[c].column.write_uint64(value)

    def write_float32(self, c: int, value: float) -> None:
        self._buffers[c].column.write_float32(value)

    def write_float64(self, c: int, value: float) -> None:
        self._buffers[c].column.write_float64(value)

    def write_bytes(self, c: int, value: bytes) -> None:
        target = self._buffers[c].column
        target.write_uvarint(len(value))
        target.write(bytes(value))

    def write_string(self, c: int, value: str) -> None:
        self.write_bytes(c, value.encode("utf-8", "surrogateescape"))

    def write_fixed_string(self, c: int, value: bytes) -> None:
        self.columns[c].write(self._buffers[c].column, value)

    def write_ip(self, c: int, value: Any) -> None:
        self.columns[c].write(self._buffers[c].column, value)

    def write_array(self, c: int, value: Any) -> None:
        if not isinstance(value, _SEQUENCES):
            raise TypeError(f"unsupported Array(T) type [{type(value).__name__}]")
        self._write_array(self.columns[c], value, c, 1)