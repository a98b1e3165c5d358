"""Parsing and canonical serialization of persisted schema documents.

Canonical layout::

    {
      "statements": [
        {
          "subject": {"type": "wbitemvariable", "columnName": "subject"},
          "property": {"pid": "P571", "label": "inception", "datatype": "time"},
          "value": {"type": "wbdatevariable", "columnName": "inception"},
          "rank": "preferred",
          "qualifiers": [{"property": {...}, "value": {...}}],
          "references": [{"snaks": [{"property": {...}, "value": {...}}]}]
        }
      ],
      "terms": [
        {"subject": {...}, "termType": "label", "value": {...}}
      ]
    }

Documents written by older versions nest statements under
``itemDocuments`` / ``statementGroups`` and repeat a ``type`` discriminator on
every object. Both are accepted; the legacy fields are dropped on parse and
never written back.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from ..datamodel.statements import StatementRank
from ..datamodel.updates import TermType
from ..errors import SchemaParseError
from .models import (
    PropertyRef,
    ReferenceTemplate,
    SnakTemplate,
    StatementTemplate,
    TermTemplate,
    WikibaseSchema,
)
from .values import VALUE_TEMPLATES, UnknownValueTemplate, ValueTemplate

logger = logging.getLogger(__name__)

# Fields written by older versions that no longer carry information.
IGNORED_FIELDS: dict[str, frozenset[str]] = {
    "schema": frozenset({"wikibasePrefix"}),
    "itemDocument": frozenset({"type"}),
    "statementGroup": frozenset({"type"}),
    "statement": frozenset({"type"}),
    "snak": frozenset({"type"}),
    "reference": frozenset({"type"}),
    "property": frozenset({"type"}),
    "term": frozenset({"type"}),
}

_LEGACY_TERM_TYPES = {
    "LABEL": TermType.LABEL,
    "DESCRIPTION": TermType.DESCRIPTION,
    "ALIAS": TermType.ALIAS,
}


@contextmanager
def _validation_errors(path: str) -> Iterator[None]:
    """Re-raise pydantic validation errors as ``SchemaParseError``."""
    try:
        yield
    except ValidationError as exc:
        error = exc.errors()[0]
        location = ".".join(str(part) for part in error["loc"])
        raise SchemaParseError(
            error["msg"], f"{path}.{location}" if location else path
        ) from exc


class SchemaCodec:
    """Reads and writes schema documents."""

    def parse(self, document: Mapping[str, Any] | str) -> WikibaseSchema:
        """Parse a schema document (mapping or JSON text).

        Raises:
            SchemaParseError: If a required field is missing or malformed
        """
        if isinstance(document, str):
            try:
                document = json.loads(document)
            except json.JSONDecodeError as exc:
                raise SchemaParseError(f"Invalid JSON: {exc.msg}") from exc

        root = self._fields(document, "schema", "$", {"statements", "terms", "itemDocuments"})

        statements: list[StatementTemplate] = []
        terms: list[TermTemplate] = []
        for index, raw in enumerate(self._list(root, "statements", "$")):
            statements.append(self._parse_statement(raw, f"$.statements[{index}]"))
        for index, raw in enumerate(self._list(root, "terms", "$")):
            terms.append(self._parse_term(raw, f"$.terms[{index}]"))
        for index, raw in enumerate(self._list(root, "itemDocuments", "$")):
            doc_statements, doc_terms = self._parse_item_document(
                raw, f"$.itemDocuments[{index}]"
            )
            statements.extend(doc_statements)
            terms.extend(doc_terms)

        return WikibaseSchema(statements=tuple(statements), terms=tuple(terms))

    def serialize(self, schema: WikibaseSchema) -> dict[str, Any]:
        """Return the canonical representation of ``schema``."""
        document: dict[str, Any] = {}
        if schema.statements:
            document["statements"] = [
                self._serialize_statement(statement) for statement in schema.statements
            ]
        if schema.terms:
            document["terms"] = [self._serialize_term(term) for term in schema.terms]
        return document

    def loads(self, text: str) -> WikibaseSchema:
        return self.parse(text)

    def dumps(self, schema: WikibaseSchema, indent: int | None = 2) -> str:
        return json.dumps(self.serialize(schema), indent=indent, ensure_ascii=False)

    def load(self, path: str | Path) -> WikibaseSchema:
        schema_file = Path(path)
        if not schema_file.exists():
            raise FileNotFoundError(f"Schema file not found: {path}")
        with open(schema_file, "r", encoding="utf-8") as f:
            return self.parse(f.read())

    def dump(self, schema: WikibaseSchema, path: str | Path) -> None:
        with open(Path(path), "w", encoding="utf-8") as f:
            f.write(self.dumps(schema))
            f.write("\n")

    # Parsing helpers

    def _fields(
        self,
        raw: Any,
        level: str,
        path: str,
        known: set[str],
    ) -> dict[str, Any]:
        """Return the known fields of an object, dropping legacy and unknown ones."""
        if not isinstance(raw, Mapping):
            raise SchemaParseError(f"Expected an object, got {type(raw).__name__}", path)
        ignored = IGNORED_FIELDS.get(level, frozenset())
        fields: dict[str, Any] = {}
        for key, value in raw.items():
            if key in known:
                fields[key] = value
            elif key not in ignored:
                logger.warning("Discarding unknown field '%s' at %s", key, path)
        return fields

    @staticmethod
    def _list(fields: Mapping[str, Any], key: str, path: str) -> list[Any]:
        value = fields.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise SchemaParseError(f"Expected a list for '{key}'", f"{path}.{key}")
        return value

    @staticmethod
    def _required(fields: Mapping[str, Any], key: str, path: str) -> Any:
        if fields.get(key) is None:
            raise SchemaParseError(f"Missing required field '{key}'", f"{path}.{key}")
        return fields[key]

    def _parse_item_document(
        self, raw: Any, path: str
    ) -> tuple[list[StatementTemplate], list[TermTemplate]]:
        fields = self._fields(
            raw, "itemDocument", path, {"subject", "statementGroups", "nameDescs"}
        )
        subject_raw = self._required(fields, "subject", path)

        statements: list[StatementTemplate] = []
        for group_index, group_raw in enumerate(self._list(fields, "statementGroups", path)):
            group_path = f"{path}.statementGroups[{group_index}]"
            group = self._fields(
                group_raw, "statementGroup", group_path, {"property", "prop", "statements"}
            )
            if "prop" in group and "property" not in group:
                group["property"] = group.pop("prop")
            property_raw = self._required(group, "property", group_path)
            for index, statement_raw in enumerate(self._list(group, "statements", group_path)):
                statements.append(
                    self._parse_statement(
                        statement_raw,
                        f"{group_path}.statements[{index}]",
                        subject_raw=subject_raw,
                        property_raw=property_raw,
                    )
                )

        terms: list[TermTemplate] = []
        for index, term_raw in enumerate(self._list(fields, "nameDescs", path)):
            term_path = f"{path}.nameDescs[{index}]"
            term = self._fields(term_raw, "term", term_path, {"name_type", "value"})
            name_type = self._required(term, "name_type", term_path)
            if name_type not in _LEGACY_TERM_TYPES:
                raise SchemaParseError(
                    f"Unknown term type '{name_type}'", f"{term_path}.name_type"
                )
            terms.append(
                self._build_term(
                    subject_raw,
                    _LEGACY_TERM_TYPES[name_type],
                    self._required(term, "value", term_path),
                    term_path,
                )
            )
        return statements, terms

    def _parse_statement(
        self,
        raw: Any,
        path: str,
        subject_raw: Any = None,
        property_raw: Any = None,
    ) -> StatementTemplate:
        fields = self._fields(
            raw,
            "statement",
            path,
            {"subject", "property", "value", "rank", "qualifiers", "references"},
        )
        if subject_raw is not None:
            fields.setdefault("subject", subject_raw)
        if property_raw is not None:
            fields.setdefault("property", property_raw)

        subject_template = self._parse_value(
            self._required(fields, "subject", path), f"{path}.subject"
        )
        main_snak = SnakTemplate(
            property=self._parse_property(
                self._required(fields, "property", path), f"{path}.property"
            ),
            value=self._parse_value(self._required(fields, "value", path), f"{path}.value"),
        )
        qualifiers = tuple(
            self._parse_snak(qualifier, f"{path}.qualifiers[{index}]")
            for index, qualifier in enumerate(self._list(fields, "qualifiers", path))
        )
        references = tuple(
            self._parse_reference(reference, f"{path}.references[{index}]")
            for index, reference in enumerate(self._list(fields, "references", path))
        )
        rank = self._parse_rank(fields.get("rank"), f"{path}.rank")

        with _validation_errors(path):
            return StatementTemplate(
                subject=subject_template,
                main_snak=main_snak,
                rank=rank,
                qualifiers=qualifiers,
                references=references,
            )

    @staticmethod
    def _parse_rank(raw: Any, path: str) -> StatementRank:
        if raw is None:
            return StatementRank.NORMAL
        try:
            return StatementRank(str(raw).lower())
        except ValueError:
            raise SchemaParseError(f"Unknown rank '{raw}'", path) from None

    def _parse_reference(self, raw: Any, path: str) -> ReferenceTemplate:
        fields = self._fields(raw, "reference", path, {"snaks"})
        snaks = tuple(
            self._parse_snak(snak, f"{path}.snaks[{index}]")
            for index, snak in enumerate(self._list(fields, "snaks", path))
        )
        if not snaks:
            raise SchemaParseError("A reference needs at least one snak", f"{path}.snaks")
        return ReferenceTemplate(snaks=snaks)

    def _parse_snak(self, raw: Any, path: str) -> SnakTemplate:
        fields = self._fields(raw, "snak", path, {"property", "prop", "value"})
        if "prop" in fields and "property" not in fields:
            fields["property"] = fields.pop("prop")
        return SnakTemplate(
            property=self._parse_property(
                self._required(fields, "property", path), f"{path}.property"
            ),
            value=self._parse_value(self._required(fields, "value", path), f"{path}.value"),
        )

    def _parse_property(self, raw: Any, path: str) -> PropertyRef:
        if isinstance(raw, str):
            raw = {"pid": raw}
        fields = self._fields(raw, "property", path, {"pid", "label", "datatype"})
        self._required(fields, "pid", path)
        with _validation_errors(path):
            return PropertyRef.model_validate(fields)

    def _parse_value(self, raw: Any, path: str) -> ValueTemplate:
        if not isinstance(raw, Mapping):
            raise SchemaParseError(f"Expected an object, got {type(raw).__name__}", path)
        kind = raw.get("type")
        if not isinstance(kind, str) or not kind:
            raise SchemaParseError("Missing value template type", f"{path}.type")

        template_cls = VALUE_TEMPLATES.get(kind)
        if template_cls is None:
            logger.warning("Unknown value template type '%s' at %s", kind, path)
            payload = {key: value for key, value in raw.items() if key != "type"}
            return UnknownValueTemplate(kind=kind, payload=payload)

        known = {
            field.alias or name for name, field in template_cls.model_fields.items()
        }
        fields = self._fields(
            {key: value for key, value in raw.items() if key != "type"},
            "value",
            path,
            known,
        )
        with _validation_errors(path):
            return template_cls.model_validate(fields)

    def _parse_term(self, raw: Any, path: str) -> TermTemplate:
        fields = self._fields(raw, "term", path, {"subject", "termType", "value"})
        term_type = self._required(fields, "termType", path)
        try:
            term_type = TermType(str(term_type).lower())
        except ValueError:
            raise SchemaParseError(
                f"Unknown term type '{term_type}'", f"{path}.termType"
            ) from None
        return self._build_term(
            self._required(fields, "subject", path),
            term_type,
            self._required(fields, "value", path),
            path,
        )

    def _build_term(
        self, subject_raw: Any, term_type: TermType, value_raw: Any, path: str
    ) -> TermTemplate:
        subject = self._parse_value(subject_raw, f"{path}.subject")
        value = self._parse_value(value_raw, f"{path}.value")
        with _validation_errors(path):
            return TermTemplate(subject=subject, term_type=term_type, value=value)

    # Serialization helpers

    def _serialize_statement(self, statement: StatementTemplate) -> dict[str, Any]:
        serialized: dict[str, Any] = {
            "subject": self._serialize_value(statement.subject),
            "property": self._serialize_property(statement.main_snak.property),
            "value": self._serialize_value(statement.main_snak.value),
        }
        if statement.rank != StatementRank.NORMAL:
            serialized["rank"] = statement.rank.value
        if statement.qualifiers:
            serialized["qualifiers"] = [
                self._serialize_snak(qualifier) for qualifier in statement.qualifiers
            ]
        if statement.references:
            serialized["references"] = [
                {"snaks": [self._serialize_snak(snak) for snak in reference.snaks]}
                for reference in statement.references
            ]
        return serialized

    def _serialize_snak(self, snak: SnakTemplate) -> dict[str, Any]:
        return {
            "property": self._serialize_property(snak.property),
            "value": self._serialize_value(snak.value),
        }

    @staticmethod
    def _serialize_property(prop: PropertyRef) -> dict[str, Any]:
        return prop.model_dump(exclude_none=True)

    @staticmethod
    def _serialize_value(template: ValueTemplate) -> dict[str, Any]:
        if isinstance(template, UnknownValueTemplate):
            return {"type": template.kind, **template.payload}
        return {
            "type": template.tag,
            **template.model_dump(mode="json", by_alias=True, exclude_defaults=True),
        }

    def _serialize_term(self, term: TermTemplate) -> dict[str, Any]:
        return {
            "subject": self._serialize_value(term.subject),
            "termType": term.term_type.value,
            "value": self._serialize_value(term.value),
        }


_codec = SchemaCodec()


def parse_schema(document: Mapping[str, Any] | str) -> WikibaseSchema:
    """Parse a schema document with the default codec."""
    return _codec.parse(document)


def serialize_schema(schema: WikibaseSchema) -> dict[str, Any]:
    """Serialize a schema to its canonical form with the default codec."""
    return _codec.serialize(schema)
