"""Resolve value templates against a row."""

from __future__ import annotations

import logging

from ...datamodel.values import (
    AnyValue,
    EntityIdValue,
    GlobeCoordinatesValue,
    MonolingualTextValue,
    QuantityValue,
    StringValue,
    TimeValue,
)
from ...errors import ValueResolutionError
from ...rows.interface import RowView
from ...schema.values import (
    ColumnTemplate,
    DateConstant,
    DateVariable,
    EntityConstant,
    EntityVariable,
    LocationConstant,
    LocationVariable,
    MonolingualConstant,
    MonolingualVariable,
    QuantityConstant,
    QuantityVariable,
    StringConstant,
    StringVariable,
    UnknownValueTemplate,
    ValueTemplate,
)

logger = logging.getLogger(__name__)


class ValueResolver:
    """Turns a ``ValueTemplate`` into a concrete value for one row.

    ``resolve`` returns None when the template produces nothing for the row
    (blank cell, unmatched cell, unknown template kind). Non-blank text that
    cannot be coerced raises ``ValueResolutionError``.
    """

    def resolve(self, template: ValueTemplate, row: RowView) -> AnyValue | None:
        if isinstance(template, ColumnTemplate):
            return self._resolve_column(template, row)

        if isinstance(template, EntityConstant):
            return EntityIdValue(id=template.qid)
        if isinstance(template, StringConstant):
            return StringValue(value=template.value)
        if isinstance(template, DateConstant):
            return template.time_value()
        if isinstance(template, QuantityConstant):
            return template.quantity_value()
        if isinstance(template, MonolingualConstant):
            return MonolingualTextValue(text=template.value, language=template.language)
        if isinstance(template, LocationConstant):
            return template.coordinates_value()
        if isinstance(template, UnknownValueTemplate):
            logger.debug("Skipping value of unknown template type '%s'", template.kind)
            return None

        raise TypeError(f"Unsupported value template: {type(template).__name__}")

    def _resolve_column(self, template: ColumnTemplate, row: RowView) -> AnyValue | None:
        text = row.cell(template.column_name)
        if text is None:
            return None

        if isinstance(template, EntityVariable):
            matched = row.match(template.column_name)
            if matched is None:
                return None
            return self._coerce(template, text, lambda: EntityIdValue(id=matched))

        if isinstance(template, StringVariable):
            return StringValue(value=text)

        if isinstance(template, DateVariable):
            value = self._coerce(
                template, text, lambda: TimeValue.parse(text, template.calendar)
            )
            if template.precision is not None:
                value = value.truncate(template.precision)
            return value

        if isinstance(template, QuantityVariable):
            return self._coerce(
                template,
                text,
                lambda: QuantityValue(
                    amount=QuantityValue.parse_amount(text), unit=template.unit
                ),
            )

        if isinstance(template, MonolingualVariable):
            return MonolingualTextValue(text=text, language=template.language)

        if isinstance(template, LocationVariable):
            return self._coerce(
                template,
                text,
                lambda: GlobeCoordinatesValue.parse(text, template.precision),
            )

        raise TypeError(f"Unsupported value template: {type(template).__name__}")

    @staticmethod
    def _coerce(template: ColumnTemplate, text: str, build):
        try:
            return build()
        except ValueError as exc:
            reason = str(exc).splitlines()[0]
            raise ValueResolutionError(reason, column=template.column_name, value=text) from exc
