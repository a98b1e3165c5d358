"""Error taxonomy for schema loading and evaluation."""

from __future__ import annotations

from typing import Iterable


class SchemaParseError(ValueError):
    """A persisted schema document is malformed.

    Args:
        reason: Human readable description of the problem
        path: Dotted JSON path of the offending node (rooted at ``$``)
    """

    def __init__(self, reason: str, path: str = "$") -> None:
        super().__init__(f"{reason} (at {path})")
        self.reason = reason
        self.path = path


class ValueResolutionError(ValueError):
    """A non-blank cell cannot be coerced to the declared value kind."""

    def __init__(
        self,
        reason: str,
        column: str | None = None,
        value: str | None = None,
    ) -> None:
        message = reason
        if column is not None:
            message = f"{reason} (column '{column}', value {value!r})"
        super().__init__(message)
        self.reason = reason
        self.column = column
        self.value = value


class ColumnNotFoundError(LookupError):
    """The schema references columns the row source does not have."""

    def __init__(self, columns: Iterable[str]) -> None:
        self.columns = list(columns)
        super().__init__(f"Columns not found in row source: {self.columns}")
