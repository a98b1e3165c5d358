"""Conversion of item updates into wikibaseintegrator claims and Wikibase JSON.

The produced objects are what an upload step feeds to
``WikibaseIntegrator``; no network access happens here.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from wikibaseintegrator.datatypes import (
    URL,
    BaseDataType,
    CommonsMedia,
    ExternalID,
    GlobeCoordinate,
    Item,
    Lexeme,
    MonolingualText,
    Property,
    Quantity,
    String,
    Time,
)
from wikibaseintegrator.models import Qualifiers, Reference, References
from wikibaseintegrator.wbi_enums import ActionIfExists, WikibaseRank, WikibaseTimePrecision

from ..datamodel.snaks import ValueSnak
from ..datamodel.statements import Statement
from ..datamodel.updates import ItemUpdate
from ..datamodel.values import (
    ENTITY_IRI_PREFIX,
    EntityIdValue,
    GlobeCoordinatesValue,
    MonolingualTextValue,
    QuantityValue,
    StringValue,
    TimeValue,
)
from ..schema.models import WikibaseSchema

_STRING_DATATYPES: dict[str, type[BaseDataType]] = {
    "string": String,
    "url": URL,
    "external-id": ExternalID,
    "commonsMedia": CommonsMedia,
}

_ENTITY_DATATYPES: dict[str, type[BaseDataType]] = {
    "item": Item,
    "property": Property,
    "lexeme": Lexeme,
}


def datatypes_from_schema(schema: WikibaseSchema) -> dict[str, str]:
    """Collect the declared datatype of every property used in ``schema``."""
    datatypes: dict[str, str] = {}
    for statement in schema.statements:
        snaks = [statement.main_snak, *statement.qualifiers]
        for reference in statement.references:
            snaks.extend(reference.snaks)
        for snak in snaks:
            if snak.property.datatype:
                datatypes.setdefault(snak.property.pid, snak.property.datatype)
    return datatypes


class WbiExporter:
    """Builds wikibaseintegrator datatypes from statements.

    Args:
        datatypes: Property id -> Wikibase datatype, used to pick the claim
            class for string values (url, external-id, ...)
        entity_prefix: IRI prefix for calendar, unit and globe entities
    """

    def __init__(
        self,
        datatypes: Mapping[str, str] | None = None,
        entity_prefix: str = ENTITY_IRI_PREFIX,
    ) -> None:
        self.datatypes = dict(datatypes or {})
        self.entity_prefix = entity_prefix

    def to_datatype(self, snak: ValueSnak, **claim_kwargs: Any) -> BaseDataType:
        value = snak.value
        prop_nr = snak.property_id

        if isinstance(value, EntityIdValue):
            datatype_cls = _ENTITY_DATATYPES[value.entity_type]
            return datatype_cls(value=value.id, prop_nr=prop_nr, **claim_kwargs)

        if isinstance(value, StringValue):
            datatype_cls = _STRING_DATATYPES.get(self.datatypes.get(prop_nr, "string"), String)
            return datatype_cls(value=value.value, prop_nr=prop_nr, **claim_kwargs)

        if isinstance(value, MonolingualTextValue):
            return MonolingualText(
                text=value.text, language=value.language, prop_nr=prop_nr, **claim_kwargs
            )

        if isinstance(value, TimeValue):
            return Time(
                time=value.time_string,
                before=value.before,
                after=value.after,
                precision=WikibaseTimePrecision(int(value.precision)),
                timezone=value.timezone,
                calendarmodel=value.calendar_model,
                prop_nr=prop_nr,
                **claim_kwargs,
            )

        if isinstance(value, QuantityValue):
            unit = f"{self.entity_prefix}{value.unit}" if value.unit else "1"
            return Quantity(
                amount=value.amount_string, unit=unit, prop_nr=prop_nr, **claim_kwargs
            )

        if isinstance(value, GlobeCoordinatesValue):
            return GlobeCoordinate(
                latitude=value.latitude,
                longitude=value.longitude,
                precision=value.precision,
                globe=value.globe,
                prop_nr=prop_nr,
                **claim_kwargs,
            )

        raise TypeError(f"Unsupported value type: {type(value).__name__}")

    def to_claim(self, statement: Statement) -> BaseDataType:
        qualifiers = Qualifiers()
        for group in statement.qualifiers:
            for snak in group.snaks:
                qualifiers.add(
                    self.to_datatype(snak), action_if_exists=ActionIfExists.APPEND_OR_REPLACE
                )

        references = References()
        for reference in statement.references:
            wbi_reference = Reference()
            for group in reference.snak_groups:
                for snak in group.snaks:
                    wbi_reference.add(self.to_datatype(snak))
            references.add(wbi_reference)

        return self.to_datatype(
            statement.main_snak,
            qualifiers=qualifiers,
            references=references,
            rank=WikibaseRank(statement.rank.value),
        )

    def to_claims(self, update: ItemUpdate) -> list[BaseDataType]:
        return [self.to_claim(statement) for statement in update.added_statements]

    def to_json(self, update: ItemUpdate) -> dict[str, Any]:
        """Wikibase entity JSON holding the additions of ``update``."""
        claims: dict[str, list[dict]] = {}
        for claim in self.to_claims(update):
            claim_json = claim.get_json()
            claims.setdefault(claim_json["mainsnak"]["property"], []).append(claim_json)

        aliases: dict[str, list[dict[str, str]]] = {}
        for alias in update.aliases:
            aliases.setdefault(alias.language, []).append(
                {"language": alias.language, "value": alias.text}
            )

        return {
            "id": update.subject_id,
            "labels": _terms_json(update.labels),
            "descriptions": _terms_json(update.descriptions),
            "aliases": aliases,
            "claims": claims,
        }


def _terms_json(terms: Iterable[MonolingualTextValue]) -> dict[str, dict[str, str]]:
    # One label/description per language; the last one wins
    return {term.language: {"language": term.language, "value": term.text} for term in terms}


def updates_to_json(
    updates: Iterable[ItemUpdate],
    datatypes: Mapping[str, str] | None = None,
) -> list[dict[str, Any]]:
    exporter = WbiExporter(datatypes)
    return [exporter.to_json(update) for update in updates]
