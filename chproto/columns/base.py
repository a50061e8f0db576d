"""The common base of all column types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class UnexpectedTypeError(TypeError):
    """A value of a type the column cannot write was given to it."""

    def __init__(self, column: Any, value: Any) -> None:
        self.column = column
        self.value = value
        super().__init__(f"{column}: unexpected type {type(value).__name__}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UnexpectedTypeError):
            return NotImplemented
        return (
            self.column is other.column
            and type(self.value) is type(other.value)
            and self.value == other.value
        )

    def __hash__(self) -> int:
        return hash((id(self.column), type(self.value)))


class Column(ABC):
    """A named column of a server-side type that reads and writes its values."""

    scan_type: Any = object
    depth: int = 0

    def __init__(self, name: str, ch_type: str) -> None:
        self.name = name
        self.ch_type = ch_type

    @abstractmethod
    def read(self, decoder: Any, is_null: bool = False) -> Any:
        """Read one value from ``decoder``."""

    @abstractmethod
    def write(self, encoder: Any, value: Any) -> None:
        """Write one value to ``encoder``."""

    def default_value(self) -> Any:
        """The value written in place of a null."""
        return self.scan_type()

    def __str__(self) -> str:
        return f"{self.name} ({self.ch_type})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.ch_type!r})"