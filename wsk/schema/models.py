"""Pydantic models for the user-authored schema."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..datamodel.statements import StatementRank
from ..datamodel.updates import TermType
from .values import ENTITY_TEMPLATES, MONOLINGUAL_TEMPLATES, ValueTemplate

if TYPE_CHECKING:
    from ..mapping.processor import EvaluationResult
    from ..rows.interface import RowFilter, RowSource

PROPERTY_ID_PATTERN = re.compile(r"^P[1-9][0-9]*$")


class PropertyRef(BaseModel):
    """A property, identified by its id; label and datatype are informational."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pid: str = Field(..., description="Property ID (P123)")
    label: str | None = Field(None, description="Property label")
    datatype: str | None = Field(None, description="Property datatype")

    @field_validator("pid")
    @classmethod
    def check_pid(cls, value: str) -> str:
        if not PROPERTY_ID_PATTERN.match(value):
            raise ValueError(f"Invalid property id: {value!r}")
        return value


class SnakTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    property: PropertyRef
    value: ValueTemplate

    def columns(self) -> tuple[str, ...]:
        return self.value.columns()


class ReferenceTemplate(BaseModel):
    """Snak templates persisted together as one reference."""

    model_config = ConfigDict(frozen=True)

    snaks: tuple[SnakTemplate, ...] = Field(..., min_length=1)

    def columns(self) -> tuple[str, ...]:
        return tuple(column for snak in self.snaks for column in snak.columns())


def _check_entity_subject(value: ValueTemplate) -> ValueTemplate:
    if not isinstance(value, ENTITY_TEMPLATES):
        raise ValueError(
            f"Subject must be an entity template, got '{type(value).__name__}'"
        )
    return value


class StatementTemplate(BaseModel):
    """Subject + main snak + rank + qualifiers + references."""

    model_config = ConfigDict(frozen=True)

    subject: ValueTemplate
    main_snak: SnakTemplate
    rank: StatementRank = StatementRank.NORMAL
    qualifiers: tuple[SnakTemplate, ...] = ()
    references: tuple[ReferenceTemplate, ...] = ()

    check_subject = field_validator("subject")(_check_entity_subject)

    def columns(self) -> tuple[str, ...]:
        columns = list(self.subject.columns())
        columns.extend(self.main_snak.columns())
        for qualifier in self.qualifiers:
            columns.extend(qualifier.columns())
        for reference in self.references:
            columns.extend(reference.columns())
        return tuple(columns)


class TermTemplate(BaseModel):
    """A label, description or alias to add to the subject."""

    model_config = ConfigDict(frozen=True)

    subject: ValueTemplate
    term_type: TermType
    value: ValueTemplate

    check_subject = field_validator("subject")(_check_entity_subject)

    @field_validator("value")
    @classmethod
    def check_monolingual(cls, value: ValueTemplate) -> ValueTemplate:
        if not isinstance(value, MONOLINGUAL_TEMPLATES):
            raise ValueError(
                f"Term value must be a monolingual template, got '{type(value).__name__}'"
            )
        return value

    def columns(self) -> tuple[str, ...]:
        return self.subject.columns() + self.value.columns()


class WikibaseSchema(BaseModel):
    """The whole mapping from table columns to knowledge-base edits."""

    model_config = ConfigDict(frozen=True)

    statements: tuple[StatementTemplate, ...] = ()
    terms: tuple[TermTemplate, ...] = ()

    def columns(self) -> list[str]:
        """Return every column the schema reads, in first-use order."""
        columns: list[str] = []
        for template in (*self.statements, *self.terms):
            columns.extend(template.columns())
        return list(dict.fromkeys(columns))

    def evaluate(
        self,
        rows: RowSource,
        row_filter: RowFilter | None = None,
        max_workers: int | None = None,
    ) -> EvaluationResult:
        """Evaluate the schema over the rows selected by ``row_filter``."""
        from ..mapping.processor import SchemaEvaluator

        evaluator = SchemaEvaluator(max_workers=max_workers)
        return evaluator.evaluate(self, rows, row_filter)
