"""Per-row evaluation state and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from ...datamodel.statements import Statement
from ...datamodel.updates import TermType
from ...datamodel.values import MonolingualTextValue
from ...rows.interface import RowView


@dataclass(frozen=True)
class ResolutionIssue:
    """A statement or term skipped because a cell could not be coerced."""

    row_index: int
    template_index: int
    reason: str
    property_id: str | None = None
    column: str | None = None
    value: str | None = None
    term_type: TermType | None = None


@dataclass(frozen=True)
class TermEntry:
    term_type: TermType
    value: MonolingualTextValue


@dataclass
class RowContribution:
    """Everything one row adds, in the order it was produced.

    ``entries`` pairs each statement or term with its resolved subject id.
    Contributions are computed independently and merged in row order.
    """

    row: RowView
    entries: list[tuple[str, Union[Statement, TermEntry]]] = field(default_factory=list)
    issues: list[ResolutionIssue] = field(default_factory=list)

    @property
    def row_index(self) -> int:
        return self.row.index

    def add_statement(self, subject_id: str, statement: Statement) -> None:
        self.entries.append((subject_id, statement))

    def add_term(self, subject_id: str, term_type: TermType, value: MonolingualTextValue) -> None:
        self.entries.append((subject_id, TermEntry(term_type, value)))

    def report(self, issue: ResolutionIssue) -> None:
        self.issues.append(issue)
