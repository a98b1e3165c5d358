"""Snaks, snak groups and references."""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, ConfigDict, model_validator

from .values import AnyValue


class ValueSnak(BaseModel):
    """A property paired with a concrete value."""

    model_config = ConfigDict(frozen=True)

    property_id: str
    value: AnyValue


class SnakGroup(BaseModel):
    """Consecutive snaks sharing the same property."""

    model_config = ConfigDict(frozen=True)

    snaks: tuple[ValueSnak, ...]

    @model_validator(mode="after")
    def check_single_property(self) -> SnakGroup:
        if not self.snaks:
            raise ValueError("A snak group cannot be empty")
        if len({snak.property_id for snak in self.snaks}) > 1:
            raise ValueError("All snaks of a group must share one property")
        return self

    @property
    def property_id(self) -> str:
        return self.snaks[0].property_id


class Reference(BaseModel):
    model_config = ConfigDict(frozen=True)

    snak_groups: tuple[SnakGroup, ...]


def group_snaks(snaks: Iterable[ValueSnak]) -> tuple[SnakGroup, ...]:
    """Group snaks by property, keeping the order in which properties first appear."""
    grouped: dict[str, list[ValueSnak]] = {}
    for snak in snaks:
        grouped.setdefault(snak.property_id, []).append(snak)
    return tuple(SnakGroup(snaks=tuple(group)) for group in grouped.values())
