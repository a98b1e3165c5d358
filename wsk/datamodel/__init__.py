"""Knowledge-base data model constructed by schema evaluation."""

from .snaks import Reference, SnakGroup, ValueSnak, group_snaks
from .statements import Statement, StatementRank
from .updates import ItemUpdate, ItemUpdateBuilder, TermType
from .values import (
    ARCSECOND,
    EARTH,
    ENTITY_IRI_PREFIX,
    GREGORIAN,
    JULIAN,
    AnyValue,
    EntityIdValue,
    GlobeCoordinatesValue,
    MonolingualTextValue,
    QuantityValue,
    StringValue,
    TimePrecision,
    TimeValue,
)

__all__ = [
    # Values
    "ARCSECOND",
    "EARTH",
    "ENTITY_IRI_PREFIX",
    "GREGORIAN",
    "JULIAN",
    "AnyValue",
    "EntityIdValue",
    "GlobeCoordinatesValue",
    "MonolingualTextValue",
    "QuantityValue",
    "StringValue",
    "TimePrecision",
    "TimeValue",
    # Snaks and statements
    "Reference",
    "SnakGroup",
    "ValueSnak",
    "group_snaks",
    "Statement",
    "StatementRank",
    # Updates
    "ItemUpdate",
    "ItemUpdateBuilder",
    "TermType",
]
