"""Statement construction for one row, built on the value resolver."""

from __future__ import annotations

import logging

from ...datamodel.snaks import Reference, ValueSnak, group_snaks
from ...datamodel.statements import Statement
from ...datamodel.values import EntityIdValue, MonolingualTextValue
from ...errors import ValueResolutionError
from ...rows.interface import RowView
from ...schema.models import (
    ReferenceTemplate,
    SnakTemplate,
    StatementTemplate,
    TermTemplate,
    WikibaseSchema,
)
from ...schema.values import ValueTemplate
from .context import ResolutionIssue, RowContribution
from .value_resolution import ValueResolver

logger = logging.getLogger(__name__)


class ClaimBuilder:
    """Builds snaks, references, statements and terms from templates."""

    def __init__(self, value_resolver: ValueResolver | None = None) -> None:
        self.value_resolver = value_resolver or ValueResolver()

    def resolve_subject(self, template: ValueTemplate, row: RowView) -> str | None:
        value = self.value_resolver.resolve(template, row)
        if isinstance(value, EntityIdValue):
            return value.id
        return None

    def build_snak(self, template: SnakTemplate, row: RowView) -> ValueSnak | None:
        value = self.value_resolver.resolve(template.value, row)
        if value is None:
            return None
        return ValueSnak(property_id=template.property.pid, value=value)

    def build_reference(self, template: ReferenceTemplate, row: RowView) -> Reference | None:
        """Resolve a reference; None when none of its snaks produce a value."""
        snaks = [
            snak
            for snak in (self.build_snak(snak_template, row) for snak_template in template.snaks)
            if snak is not None
        ]
        if not snaks:
            return None
        return Reference(snak_groups=group_snaks(snaks))

    def build_statement(
        self, template: StatementTemplate, row: RowView
    ) -> tuple[str, Statement] | None:
        """Return ``(subject_id, statement)`` or None if subject or main value is absent.

        Raises:
            ValueResolutionError: If any part of the statement has malformed input
        """
        subject_id = self.resolve_subject(template.subject, row)
        if subject_id is None:
            return None

        main_snak = self.build_snak(template.main_snak, row)
        if main_snak is None:
            return None

        qualifiers = [
            snak
            for snak in (self.build_snak(qualifier, row) for qualifier in template.qualifiers)
            if snak is not None
        ]
        references = [
            reference
            for reference in (self.build_reference(ref, row) for ref in template.references)
            if reference is not None
        ]

        statement = Statement(
            subject_id=subject_id,
            main_snak=main_snak,
            qualifiers=group_snaks(qualifiers),
            references=tuple(references),
            rank=template.rank,
        )
        return subject_id, statement

    def build_term(
        self, template: TermTemplate, row: RowView
    ) -> tuple[str, MonolingualTextValue] | None:
        subject_id = self.resolve_subject(template.subject, row)
        if subject_id is None:
            return None
        value = self.value_resolver.resolve(template.value, row)
        if not isinstance(value, MonolingualTextValue):
            return None
        return subject_id, value

    def apply_row(self, schema: WikibaseSchema, row: RowView) -> RowContribution:
        """Evaluate every template of ``schema`` against one row.

        A template whose input cannot be coerced is skipped for this row and
        reported on the returned contribution.
        """
        contribution = RowContribution(row=row)

        for index, template in enumerate(schema.statements):
            try:
                built = self.build_statement(template, row)
            except ValueResolutionError as exc:
                issue = ResolutionIssue(
                    row_index=row.index,
                    template_index=index,
                    reason=exc.reason,
                    property_id=template.main_snak.property.pid,
                    column=exc.column,
                    value=exc.value,
                )
                logger.warning(
                    "Row %d: skipping %s statement: %s", row.index, issue.property_id, exc
                )
                contribution.report(issue)
                continue
            if built is not None:
                contribution.add_statement(*built)

        for index, term in enumerate(schema.terms):
            try:
                built_term = self.build_term(term, row)
            except ValueResolutionError as exc:
                logger.warning("Row %d: skipping %s term: %s", row.index, term.term_type.value, exc)
                contribution.report(
                    ResolutionIssue(
                        row_index=row.index,
                        template_index=index,
                        reason=exc.reason,
                        column=exc.column,
                        value=exc.value,
                        term_type=term.term_type,
                    )
                )
                continue
            if built_term is not None:
                subject_id, value = built_term
                contribution.add_term(subject_id, term.term_type, value)

        return contribution
