"""Typed values carried by snaks.

The classes mirror the Wikibase value types. They are immutable and compare
structurally, which is what item update equality relies on.
"""

from __future__ import annotations

import math
import re
from calendar import monthrange
from decimal import Decimal, InvalidOperation
from enum import IntEnum
from typing import Union

from pydantic import BaseModel, ConfigDict, field_validator

ENTITY_IRI_PREFIX = "http://www.wikidata.org/entity/"
GREGORIAN = f"{ENTITY_IRI_PREFIX}Q1985727"
JULIAN = f"{ENTITY_IRI_PREFIX}Q1985786"
CALENDAR_MODELS = (GREGORIAN, JULIAN)
EARTH = f"{ENTITY_IRI_PREFIX}Q2"
ARCSECOND = 1 / 3600

ENTITY_ID_PATTERN = re.compile(r"^[QPL][1-9][0-9]*$")
ITEM_ID_PATTERN = re.compile(r"^Q[1-9][0-9]*$")

_TIME_PATTERN = re.compile(
    r"^(?P<year>[+-]?\d{1,16})"
    r"(?:-(?P<month>\d{1,2})"
    r"(?:-(?P<day>\d{1,2})"
    r"(?:[T ](?P<hour>\d{1,2})(?::(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?Z?)?"
    r")?)?"
    r"(?:_(?P<calendar>Q[1-9][0-9]*))?$"
)


class TimePrecision(IntEnum):
    """Wikibase time precision codes."""

    MILLENNIUM = 6
    CENTURY = 7
    DECADE = 8
    YEAR = 9
    MONTH = 10
    DAY = 11
    HOUR = 12
    MINUTE = 13
    SECOND = 14


def normalize_calendar(calendar_model: str) -> str:
    """Return the IRI of a supported calendar model given an IRI or a bare QID."""
    if ITEM_ID_PATTERN.match(calendar_model):
        calendar_model = f"{ENTITY_IRI_PREFIX}{calendar_model}"
    if calendar_model not in CALENDAR_MODELS:
        raise ValueError(f"Unsupported calendar model: {calendar_model}")
    return calendar_model


class Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class EntityIdValue(Value):
    id: str

    @field_validator("id")
    @classmethod
    def check_id(cls, value: str) -> str:
        if not ENTITY_ID_PATTERN.match(value):
            raise ValueError(f"Invalid entity id: {value!r}")
        return value

    @property
    def entity_type(self) -> str:
        return {
            "Q": "item",
            "P": "property",
            "L": "lexeme",
        }[self.id[0]]


class StringValue(Value):
    value: str


class MonolingualTextValue(Value):
    text: str
    language: str


class TimeValue(Value):
    """A point in time at a given precision.

    Components finer than ``precision`` are always zero.
    """

    year: int
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    precision: TimePrecision = TimePrecision.DAY
    before: int = 0
    after: int = 0
    timezone: int = 0
    calendar_model: str = GREGORIAN

    @classmethod
    def parse(cls, text: str, calendar_model: str = GREGORIAN) -> TimeValue:
        """Parse date text such as ``1919``, ``2018-02``, ``2018-02-28``.

        Times of day (``2018-02-28T10:30:00Z``) and a trailing calendar
        suffix (``1582-10-04_Q1985786``) are accepted as well.

        Raises:
            ValueError: If the text is not a valid date
        """
        match = _TIME_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"Unrecognized date format: {text!r}")

        parts = match.groupdict()
        year = int(parts["year"])
        month = int(parts["month"] or 0)
        day = int(parts["day"] or 0)
        hour = int(parts["hour"] or 0)
        minute = int(parts["minute"] or 0)
        second = int(parts["second"] or 0)

        if parts["second"] is not None:
            precision = TimePrecision.SECOND
        elif parts["minute"] is not None:
            precision = TimePrecision.MINUTE
        elif parts["hour"] is not None:
            precision = TimePrecision.HOUR
        elif parts["day"] is not None:
            precision = TimePrecision.DAY
        elif parts["month"] is not None:
            precision = TimePrecision.MONTH
        else:
            precision = TimePrecision.YEAR

        if precision >= TimePrecision.MONTH and not 1 <= month <= 12:
            raise ValueError(f"Invalid month in date: {text!r}")
        if precision >= TimePrecision.DAY:
            last_day = monthrange(year, month)[1] if 1 <= year <= 9999 else 31
            if not 1 <= day <= last_day:
                raise ValueError(f"Invalid day in date: {text!r}")
        if hour > 23 or minute > 59 or second > 59:
            raise ValueError(f"Invalid time of day in date: {text!r}")

        if parts["calendar"]:
            calendar_model = parts["calendar"]

        return cls(
            year=year,
            month=month,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            precision=precision,
            calendar_model=normalize_calendar(calendar_model),
        )

    def truncate(self, precision: TimePrecision) -> TimeValue:
        """Return a copy reduced to ``precision`` (no-op if already coarser)."""
        if precision >= self.precision:
            return self
        fields = {
            "month": TimePrecision.MONTH,
            "day": TimePrecision.DAY,
            "hour": TimePrecision.HOUR,
            "minute": TimePrecision.MINUTE,
            "second": TimePrecision.SECOND,
        }
        update: dict[str, object] = {
            name: 0 for name, needed in fields.items() if precision < needed
        }
        update["precision"] = precision
        return self.model_copy(update=update)

    @property
    def time_string(self) -> str:
        """Wikibase time string, e.g. ``+1919-00-00T00:00:00Z``."""
        sign = "-" if self.year < 0 else "+"
        return (
            f"{sign}{abs(self.year):04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}Z"
        )


class QuantityValue(Value):
    amount: Decimal
    unit: str | None = None

    @field_validator("unit")
    @classmethod
    def check_unit(cls, value: str | None) -> str | None:
        if value is not None and not ITEM_ID_PATTERN.match(value):
            raise ValueError(f"Invalid unit item id: {value!r}")
        return value

    @staticmethod
    def parse_amount(text: str) -> Decimal:
        """Parse a decimal amount such as ``42``, ``+3.5`` or ``-1e3``."""
        cleaned = text.strip()
        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            raise ValueError(f"Invalid quantity amount: {text!r}") from None
        if not amount.is_finite():
            raise ValueError(f"Invalid quantity amount: {text!r}")
        return amount

    @property
    def amount_string(self) -> str:
        text = format(self.amount, "f")
        return text if text.startswith("-") else f"+{text}"


class GlobeCoordinatesValue(Value):
    latitude: float
    longitude: float
    precision: float = ARCSECOND
    globe: str = EARTH

    @classmethod
    def parse(cls, text: str, precision: float = ARCSECOND) -> GlobeCoordinatesValue:
        """Parse ``"latitude,longitude"`` in decimal degrees."""
        parts = [part.strip() for part in text.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Invalid coordinates: {text!r}")
        try:
            latitude, longitude = float(parts[0]), float(parts[1])
        except ValueError:
            raise ValueError(f"Invalid coordinates: {text!r}") from None
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValueError(f"Invalid coordinates: {text!r}")
        if not -90 <= latitude <= 90 or not -360 <= longitude <= 360:
            raise ValueError(f"Coordinates out of range: {text!r}")
        return cls(latitude=latitude, longitude=longitude, precision=precision)


AnyValue = Union[
    EntityIdValue,
    StringValue,
    MonolingualTextValue,
    TimeValue,
    QuantityValue,
    GlobeCoordinatesValue,
]
