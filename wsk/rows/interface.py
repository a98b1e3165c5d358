from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


class RowSource(ABC):
    """Read-only access to table rows and their reconciliation state."""

    @property
    @abstractmethod
    def column_names(self) -> Sequence[str]:
        """Names of the columns, in table order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        """Number of rows."""
        pass

    @abstractmethod
    def cell(self, row_index: int, column: str | int) -> str | None:
        """Trimmed text of a cell, or None if the cell is blank."""
        pass

    @abstractmethod
    def match(self, row_index: int, column: str | int) -> str | None:
        """Entity id the cell is reconciled to, or None if it is unmatched."""
        pass

    def row(self, row_index: int) -> RowView:
        return RowView(self, row_index)


class RowFilter(ABC):
    """Selects which rows take part in an evaluation."""

    @abstractmethod
    def includes(self, row_index: int) -> bool:
        pass


class AllRows(RowFilter):
    def includes(self, row_index: int) -> bool:
        return True


@dataclass(frozen=True)
class RowView:
    """A single row of a ``RowSource``."""

    source: RowSource
    index: int

    def cell(self, column: str | int) -> str | None:
        return self.source.cell(self.index, column)

    def match(self, column: str | int) -> str | None:
        return self.source.match(self.index, column)
