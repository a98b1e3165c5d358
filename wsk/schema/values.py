"""Value templates: how to derive one typed value from a row or a literal.

Every template kind has a fixed tag, used as the ``type`` field of its
persisted form. ``VALUE_TEMPLATES`` maps tags to classes; tags missing from it
are kept as ``UnknownValueTemplate`` so that documents written by newer
versions still load.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..datamodel.values import (
    ARCSECOND,
    GREGORIAN,
    ITEM_ID_PATTERN,
    ENTITY_ID_PATTERN,
    GlobeCoordinatesValue,
    QuantityValue,
    TimePrecision,
    TimeValue,
    normalize_calendar,
)


class ValueTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    tag: ClassVar[str] = ""

    def columns(self) -> tuple[str, ...]:
        """Columns read by this template."""
        return ()


class ColumnTemplate(ValueTemplate):
    column_name: str = Field(..., alias="columnName", min_length=1)

    def columns(self) -> tuple[str, ...]:
        return (self.column_name,)


def _check_item_id(value: str | None) -> str | None:
    if value is not None and not ITEM_ID_PATTERN.match(value):
        raise ValueError(f"Invalid item id: {value!r}")
    return value


def _check_not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("Literal value cannot be blank")
    return value


class EntityVariable(ColumnTemplate):
    """Entity the cell is reconciled to."""

    tag: ClassVar[str] = "wbitemvariable"


class EntityConstant(ValueTemplate):
    tag: ClassVar[str] = "wbitemconstant"

    qid: str
    label: str | None = None

    @field_validator("qid")
    @classmethod
    def check_qid(cls, value: str) -> str:
        if not ENTITY_ID_PATTERN.match(value):
            raise ValueError(f"Invalid entity id: {value!r}")
        return value


class StringVariable(ColumnTemplate):
    tag: ClassVar[str] = "wbstringvariable"


class StringConstant(ValueTemplate):
    tag: ClassVar[str] = "wbstringconstant"

    value: str

    check_value = field_validator("value")(_check_not_blank)


class DateVariable(ColumnTemplate):
    """Date parsed from the cell text.

    ``precision``, when set, caps the precision of the resolved value.
    """

    tag: ClassVar[str] = "wbdatevariable"

    calendar: str = GREGORIAN
    precision: TimePrecision | None = None

    check_calendar = field_validator("calendar")(normalize_calendar)


class DateConstant(ValueTemplate):
    tag: ClassVar[str] = "wbdateconstant"

    value: str
    calendar: str = GREGORIAN

    check_calendar = field_validator("calendar")(normalize_calendar)

    @field_validator("value")
    @classmethod
    def check_date(cls, value: str) -> str:
        TimeValue.parse(value)
        return value

    def time_value(self) -> TimeValue:
        return TimeValue.parse(self.value, self.calendar)


class QuantityVariable(ColumnTemplate):
    tag: ClassVar[str] = "wbquantityvariable"

    unit: str | None = None

    check_unit = field_validator("unit")(_check_item_id)


class QuantityConstant(ValueTemplate):
    tag: ClassVar[str] = "wbquantityconstant"

    amount: str
    unit: str | None = None

    check_unit = field_validator("unit")(_check_item_id)

    @field_validator("amount")
    @classmethod
    def check_amount(cls, value: str) -> str:
        QuantityValue.parse_amount(value)
        return value

    def quantity_value(self) -> QuantityValue:
        return QuantityValue(
            amount=QuantityValue.parse_amount(self.amount), unit=self.unit
        )


class MonolingualVariable(ColumnTemplate):
    tag: ClassVar[str] = "wbmonolingualvariable"

    language: str = Field(..., min_length=1)


class MonolingualConstant(ValueTemplate):
    tag: ClassVar[str] = "wbmonolingualconstant"

    value: str
    language: str = Field(..., min_length=1)

    check_value = field_validator("value")(_check_not_blank)


class LocationVariable(ColumnTemplate):
    tag: ClassVar[str] = "wblocationvariable"

    precision: float = Field(ARCSECOND, gt=0)


class LocationConstant(ValueTemplate):
    tag: ClassVar[str] = "wblocationconstant"

    value: str
    precision: float = Field(ARCSECOND, gt=0)

    @field_validator("value")
    @classmethod
    def check_coordinates(cls, value: str) -> str:
        GlobeCoordinatesValue.parse(value)
        return value

    def coordinates_value(self) -> GlobeCoordinatesValue:
        return GlobeCoordinatesValue.parse(self.value, self.precision)


class UnknownValueTemplate(ValueTemplate):
    """Template whose tag this version does not know; it never produces a value."""

    kind: str
    payload: dict[str, Any] = Field(default_factory=dict)


VALUE_TEMPLATES: dict[str, type[ValueTemplate]] = {
    cls.tag: cls
    for cls in (
        EntityVariable,
        EntityConstant,
        StringVariable,
        StringConstant,
        DateVariable,
        DateConstant,
        QuantityVariable,
        QuantityConstant,
        MonolingualVariable,
        MonolingualConstant,
        LocationVariable,
        LocationConstant,
    )
}

ENTITY_TEMPLATES = (EntityVariable, EntityConstant)
MONOLINGUAL_TEMPLATES = (MonolingualVariable, MonolingualConstant)
