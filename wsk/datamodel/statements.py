"""Statements and ranks."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .snaks import Reference, SnakGroup, ValueSnak


class StatementRank(str, Enum):
    NORMAL = "normal"
    PREFERRED = "preferred"
    DEPRECATED = "deprecated"


class Statement(BaseModel):
    """One property-value assertion about a subject, with references."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    main_snak: ValueSnak
    qualifiers: tuple[SnakGroup, ...] = ()
    references: tuple[Reference, ...] = ()
    rank: StatementRank = StatementRank.NORMAL

    @property
    def property_id(self) -> str:
        return self.main_snak.property_id
