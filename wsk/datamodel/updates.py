"""Item updates: everything to add to one subject entity."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .statements import Statement
from .values import MonolingualTextValue


class TermType(str, Enum):
    LABEL = "label"
    DESCRIPTION = "description"
    ALIAS = "alias"


class ItemUpdate(BaseModel):
    """Statements and terms to add to a single entity.

    Two updates are equal when they target the same subject and carry the
    same statements and terms in the same order.
    """

    model_config = ConfigDict(frozen=True)

    subject_id: str
    added_statements: tuple[Statement, ...] = ()
    labels: tuple[MonolingualTextValue, ...] = ()
    descriptions: tuple[MonolingualTextValue, ...] = ()
    aliases: tuple[MonolingualTextValue, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.added_statements or self.labels or self.descriptions or self.aliases
        )


class ItemUpdateBuilder:
    """Accumulates statements and terms for one subject, then freezes them."""

    def __init__(self, subject_id: str) -> None:
        self.subject_id = subject_id
        self._statements: list[Statement] = []
        self._terms: dict[TermType, list[MonolingualTextValue]] = {
            term_type: [] for term_type in TermType
        }
        self._built = False

    def add_statement(self, statement: Statement) -> ItemUpdateBuilder:
        self._check_not_built()
        if statement.subject_id != self.subject_id:
            raise ValueError(
                f"Statement subject {statement.subject_id} does not match "
                f"update subject {self.subject_id}"
            )
        self._statements.append(statement)
        return self

    def add_term(
        self, term_type: TermType, value: MonolingualTextValue
    ) -> ItemUpdateBuilder:
        self._check_not_built()
        self._terms[term_type].append(value)
        return self

    def add_label(self, value: MonolingualTextValue) -> ItemUpdateBuilder:
        return self.add_term(TermType.LABEL, value)

    def add_description(self, value: MonolingualTextValue) -> ItemUpdateBuilder:
        return self.add_term(TermType.DESCRIPTION, value)

    def add_alias(self, value: MonolingualTextValue) -> ItemUpdateBuilder:
        return self.add_term(TermType.ALIAS, value)

    def build(self) -> ItemUpdate:
        self._check_not_built()
        self._built = True
        return ItemUpdate(
            subject_id=self.subject_id,
            added_statements=tuple(self._statements),
            labels=tuple(self._terms[TermType.LABEL]),
            descriptions=tuple(self._terms[TermType.DESCRIPTION]),
            aliases=tuple(self._terms[TermType.ALIAS]),
        )

    def _check_not_built(self) -> None:
        if self._built:
            raise RuntimeError("ItemUpdateBuilder has already been built")
