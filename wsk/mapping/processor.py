"""Schema evaluation: (schema, rows, row filter) -> item updates."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable

from ..datamodel.statements import Statement
from ..datamodel.updates import ItemUpdate, ItemUpdateBuilder
from ..errors import ColumnNotFoundError
from ..rows.interface import AllRows, RowFilter, RowSource
from ..schema.models import WikibaseSchema
from .pipeline import ClaimBuilder, ResolutionIssue, RowContribution

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    """Item updates in first-seen subject order, plus skipped templates."""

    updates: list[ItemUpdate] = field(default_factory=list)
    issues: list[ResolutionIssue] = field(default_factory=list)
    rows_selected: int = 0

    @property
    def statement_count(self) -> int:
        return sum(len(update.added_statements) for update in self.updates)


class SchemaEvaluator:
    """Evaluates a schema over the rows a filter selects.

    Rows are independent: each selected row yields a ``RowContribution``,
    optionally on a thread pool, and contributions are merged into the
    subject-keyed accumulator in row order, so the output does not depend on
    ``max_workers``.
    """

    def __init__(
        self,
        claim_builder: ClaimBuilder | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.claim_builder = claim_builder or ClaimBuilder()
        self.max_workers = max_workers

    def validate_columns(self, schema: WikibaseSchema, rows: RowSource) -> None:
        """Raise ``ColumnNotFoundError`` listing every schema column the rows lack."""
        available = set(rows.column_names)
        missing = [column for column in schema.columns() if column not in available]
        if missing:
            raise ColumnNotFoundError(missing)

    def evaluate(
        self,
        schema: WikibaseSchema,
        rows: RowSource,
        row_filter: RowFilter | None = None,
    ) -> EvaluationResult:
        self.validate_columns(schema, rows)
        row_filter = row_filter or AllRows()

        start_time = time.perf_counter()
        selected = [index for index in range(len(rows)) if row_filter.includes(index)]
        contributions = self._collect(schema, rows, selected)
        result = self._merge(contributions)
        result.rows_selected = len(selected)

        logger.info(
            "Evaluated %d/%d rows into %d item updates (%d statements, %d skipped) in %.2fs",
            len(selected),
            len(rows),
            len(result.updates),
            result.statement_count,
            len(result.issues),
            time.perf_counter() - start_time,
        )
        return result

    def _collect(
        self,
        schema: WikibaseSchema,
        rows: RowSource,
        selected: list[int],
    ) -> list[RowContribution]:
        def apply(index: int) -> RowContribution:
            return self.claim_builder.apply_row(schema, rows.row(index))

        if self.max_workers and self.max_workers > 1 and len(selected) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields results in submission order
                return list(executor.map(apply, selected))
        return [apply(index) for index in selected]

    @staticmethod
    def _merge(contributions: Iterable[RowContribution]) -> EvaluationResult:
        builders: dict[str, ItemUpdateBuilder] = {}
        issues: list[ResolutionIssue] = []

        for contribution in contributions:
            for subject_id, entry in contribution.entries:
                builder = builders.get(subject_id)
                if builder is None:
                    builder = builders[subject_id] = ItemUpdateBuilder(subject_id)
                if isinstance(entry, Statement):
                    builder.add_statement(entry)
                else:
                    builder.add_term(entry.term_type, entry.value)
            issues.extend(contribution.issues)

        return EvaluationResult(
            updates=[builder.build() for builder in builders.values()],
            issues=issues,
        )
