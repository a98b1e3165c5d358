"""Schema model and its JSON persistence."""

from .codec import SchemaCodec, parse_schema, serialize_schema
from .models import (
    PropertyRef,
    ReferenceTemplate,
    SnakTemplate,
    StatementTemplate,
    TermTemplate,
    WikibaseSchema,
)
from .values import (
    VALUE_TEMPLATES,
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

__all__ = [
    # Codec
    "SchemaCodec",
    "parse_schema",
    "serialize_schema",
    # Models
    "PropertyRef",
    "ReferenceTemplate",
    "SnakTemplate",
    "StatementTemplate",
    "TermTemplate",
    "WikibaseSchema",
    # Value templates
    "VALUE_TEMPLATES",
    "DateConstant",
    "DateVariable",
    "EntityConstant",
    "EntityVariable",
    "LocationConstant",
    "LocationVariable",
    "MonolingualConstant",
    "MonolingualVariable",
    "QuantityConstant",
    "QuantityVariable",
    "StringConstant",
    "StringVariable",
    "UnknownValueTemplate",
    "ValueTemplate",
]
