"""Export of item updates for an upload step."""

from .wbi import WbiExporter, datatypes_from_schema, updates_to_json

__all__ = ["WbiExporter", "datatypes_from_schema", "updates_to_json"]
