"""The common base of all column types and the error for unsupported values."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

__all__ = ["UnexpectedTypeError", "Column"]


class UnexpectedTypeError(TypeError):
    """A column was given a value of a type it cannot write."""

    def __init__(self, column: "Column", value: Any) -> None:
        self.column = column
        self.value = value
        super().__init__(f"{column}: unexpected type {type(value).__name__}")


class Column(ABC):
    """A named column of one wire type."""

    scan_type: Optional[type] = None

    def __init__(self, name: str, ch_type: str) -> None:
        self.name = name
        self.ch_type = ch_type

    @abstractmethod
    def read(self, decoder):
        """Read one value of this column from ``decoder``."""

    def write(self, encoder, value) -> None:
        """Write ``value``; the base accepts no type at all."""
        raise UnexpectedTypeError(self, value)

    def default_value(self):
        """Return the zero value written in place of a null."""
        return None if self.scan_type is None else self.scan_type()

    def __str__(self) -> str:
        return f"{self.name} ({self.ch_type})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, ch_type={self.ch_type!r})"