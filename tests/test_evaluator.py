"""Tests for evaluating a schema over rows into item updates."""

import pytest

from wsk.datamodel import (
    EntityIdValue,
    ItemUpdateBuilder,
    MonolingualTextValue,
    Reference,
    Statement,
    StatementRank,
    StringValue,
    TimePrecision,
    TimeValue,
    ValueSnak,
    group_snaks,
)
from wsk.errors import ColumnNotFoundError
from wsk.mapping import SchemaEvaluator
from wsk.rows import FacetEngine, RowFilter
from wsk.schema import parse_schema

UNIVERSITY_URL = "http://www.ljubljana-slovenia.com/university-ljubljana"


def _inception(subject_id, year, url=None):
    retrieved = ValueSnak(property_id="P813", value=TimeValue(year=2018, month=2, day=28))
    snaks = [retrieved]
    if url is not None:
        snaks.insert(0, ValueSnak(property_id="P854", value=StringValue(value=url)))
    return Statement(
        subject_id=subject_id,
        main_snak=ValueSnak(
            property_id="P571", value=TimeValue(year=year, precision=TimePrecision.YEAR)
        ),
        references=(Reference(snak_groups=group_snaks(snaks)),),
    )


def _subject(column="subject"):
    return {"type": "wbitemvariable", "columnName": column}


class TestInceptionScenario:
    """Two universities reconciled by hand, one of them lacking a reference URL."""

    def test_evaluate(self, load_schema, university_rows):
        result = load_schema("inception.json").evaluate(university_rows)

        expected = [
            ItemUpdateBuilder("Q1377").add_statement(_inception("Q1377", 1919, UNIVERSITY_URL)).build(),
            ItemUpdateBuilder("Q865528").add_statement(_inception("Q865528", 1965)).build(),
        ]
        assert result.updates == expected
        assert result.issues == []
        assert result.rows_selected == 2
        assert result.statement_count == 2

    def test_evaluate_respects_facets(self, load_schema, university_rows):
        engine = FacetEngine(
            university_rows,
            {
                "mode": "row-based",
                "facets": [
                    {
                        "mode": "text",
                        "invert": False,
                        "caseSensitive": False,
                        "query": "www",
                        "name": "reference",
                        "type": "text",
                        "columnName": "reference",
                    }
                ],
            },
        )
        result = load_schema("inception.json").evaluate(university_rows, engine)

        expected = [
            ItemUpdateBuilder("Q1377").add_statement(_inception("Q1377", 1919, UNIVERSITY_URL)).build()
        ]
        assert result.updates == expected
        assert result.rows_selected == 1

    def test_parallel_equals_sequential(self, load_schema, university_rows):
        schema = load_schema("inception.json")
        sequential = SchemaEvaluator().evaluate(schema, university_rows)
        parallel = SchemaEvaluator(max_workers=4).evaluate(schema, university_rows)
        assert parallel.updates == sequential.updates


class TestGrouping:
    def test_statements_group_by_subject_in_first_seen_order(self, make_rows):
        rows = make_rows(
            {"item": ["a", "b", "a"], "name": ["x", "y", "z"]},
            matches={(0, "item"): "Q2", (1, "item"): "Q1", (2, "item"): "Q2"},
        )
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject("item"),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    }
                ]
            }
        )
        result = schema.evaluate(rows)

        assert [update.subject_id for update in result.updates] == ["Q2", "Q1"]
        first = result.updates[0]
        assert [s.main_snak.value.value for s in first.added_statements] == ["x", "z"]

    def test_constant_subject_collects_every_row(self, make_rows):
        rows = make_rows({"name": ["x", "y"]})
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": {"type": "wbitemconstant", "qid": "Q42"},
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    }
                ]
            }
        )
        (update,) = schema.evaluate(rows).updates
        assert update.subject_id == "Q42"
        assert len(update.added_statements) == 2

    def test_terms_are_attached_to_the_subject(self, make_rows):
        rows = make_rows({"item": ["a"], "name": ["Ada Lovelace"]}, matches={(0, "item"): "Q7259"})
        schema = parse_schema(
            {
                "terms": [
                    {
                        "subject": _subject("item"),
                        "termType": "label",
                        "value": {"type": "wbmonolingualvariable", "columnName": "name", "language": "en"},
                    },
                    {
                        "subject": _subject("item"),
                        "termType": "description",
                        "value": {"type": "wbmonolingualconstant", "value": "mathematician", "language": "en"},
                    },
                ]
            }
        )
        (update,) = schema.evaluate(rows).updates
        assert update.labels == (MonolingualTextValue(text="Ada Lovelace", language="en"),)
        assert update.descriptions == (MonolingualTextValue(text="mathematician", language="en"),)
        assert update.added_statements == ()


class TestAbsentValues:
    def test_unmatched_subject_skips_statement(self, make_rows):
        rows = make_rows({"subject": ["a", "b"], "name": ["x", "y"]}, matches={(1, "subject"): "Q1"})
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject(),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    }
                ]
            }
        )
        result = schema.evaluate(rows)
        assert [update.subject_id for update in result.updates] == ["Q1"]

    def test_blank_main_value_skips_statement(self, make_rows):
        rows = make_rows({"subject": ["a"], "name": [""]}, matches={(0, "subject"): "Q1"})
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject(),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    }
                ]
            }
        )
        assert schema.evaluate(rows).updates == []

    def test_blank_qualifier_is_dropped(self, make_rows):
        rows = make_rows(
            {"subject": ["a"], "name": ["x"], "lang": [""]}, matches={(0, "subject"): "Q1"}
        )
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject(),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                        "rank": "preferred",
                        "qualifiers": [
                            {"property": {"pid": "P407"}, "value": {"type": "wbitemvariable", "columnName": "lang"}},
                            {"property": {"pid": "P1810"}, "value": {"type": "wbstringconstant", "value": "named as"}},
                        ],
                    }
                ]
            }
        )
        (update,) = schema.evaluate(rows).updates
        (statement,) = update.added_statements
        assert statement.rank == StatementRank.PREFERRED
        assert [group.property_id for group in statement.qualifiers] == ["P1810"]

    def test_reference_with_only_blank_snaks_is_dropped(self, make_rows):
        rows = make_rows(
            {"subject": ["a"], "inception": ["1919"], "url": [" "]},
            matches={(0, "subject"): "Q1377"},
        )
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject(),
                        "property": {"pid": "P571"},
                        "value": {"type": "wbdatevariable", "columnName": "inception"},
                        "references": [
                            {
                                "snaks": [
                                    {
                                        "property": {"pid": "P854"},
                                        "value": {"type": "wbstringvariable", "columnName": "url"},
                                    }
                                ]
                            }
                        ],
                    }
                ]
            }
        )
        (update,) = schema.evaluate(rows).updates
        (statement,) = update.added_statements
        assert statement.property_id == "P571"
        assert statement.main_snak.value == TimeValue(year=1919, precision=TimePrecision.YEAR)
        assert statement.references == ()


class TestIssues:
    def test_malformed_cell_skips_only_that_statement(self, make_rows):
        rows = make_rows(
            {"subject": ["a", "b"], "born": ["1815-12-10", "sometime"], "name": ["x", "y"]},
            matches={(0, "subject"): "Q7259", (1, "subject"): "Q1"},
        )
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject(),
                        "property": {"pid": "P569"},
                        "value": {"type": "wbdatevariable", "columnName": "born"},
                    },
                    {
                        "subject": _subject(),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    },
                ]
            }
        )
        result = schema.evaluate(rows)

        assert [len(update.added_statements) for update in result.updates] == [2, 1]
        (issue,) = result.issues
        assert issue.row_index == 1
        assert issue.template_index == 0
        assert issue.property_id == "P569"
        assert issue.column == "born"
        assert issue.value == "sometime"

    def test_missing_columns_fail_before_evaluation(self, load_schema, make_rows):
        rows = make_rows({"subject": ["a"]})
        with pytest.raises(ColumnNotFoundError) as excinfo:
            load_schema("inception.json").evaluate(rows)
        assert excinfo.value.columns == ["inception", "reference"]


class _CountingFilter(RowFilter):
    def __init__(self, selected):
        self.selected = set(selected)
        self.calls = []

    def includes(self, row_index):
        self.calls.append(row_index)
        return row_index in self.selected


class TestRowFilter:
    def test_filter_is_asked_once_per_row(self, load_schema, university_rows):
        row_filter = _CountingFilter({1})
        result = load_schema("inception.json").evaluate(university_rows, row_filter)

        assert row_filter.calls == [0, 1]
        assert [update.subject_id for update in result.updates] == ["Q865528"]

    def test_filter_equals_physical_removal(self, make_rows):
        columns = {"item": ["a", "b", "c"], "name": ["x", "y", "z"]}
        matches = {(0, "item"): "Q1", (1, "item"): "Q2", (2, "item"): "Q1"}
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject("item"),
                        "property": {"pid": "P1448"},
                        "value": {"type": "wbstringvariable", "columnName": "name"},
                    }
                ]
            }
        )

        filtered = schema.evaluate(make_rows(columns, matches=matches), _CountingFilter({0, 2}))
        removed = schema.evaluate(
            make_rows(
                {column: [values[0], values[2]] for column, values in columns.items()},
                matches={(0, "item"): "Q1", (1, "item"): "Q1"},
            )
        )

        assert filtered.updates == removed.updates
        (update,) = filtered.updates
        assert update.subject_id == "Q1"
        assert [s.main_snak.value.value for s in update.added_statements] == ["x", "z"]

    def test_empty_selection(self, load_schema, university_rows):
        result = load_schema("inception.json").evaluate(university_rows, _CountingFilter(()))
        assert result.updates == []
        assert result.rows_selected == 0

    def test_entity_values_from_id_columns(self, make_rows):
        rows = make_rows({"item": ["Q1"], "country": ["Q215"]}, id_columns=["item", "country"])
        schema = parse_schema(
            {
                "statements": [
                    {
                        "subject": _subject("item"),
                        "property": {"pid": "P17"},
                        "value": {"type": "wbitemvariable", "columnName": "country"},
                    }
                ]
            }
        )
        (update,) = schema.evaluate(rows).updates
        assert update.added_statements[0].main_snak.value == EntityIdValue(id="Q215")
