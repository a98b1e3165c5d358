from pathlib import Path

import pandas as pd
import pytest

from wsk.rows import DataFrameRowSource
from wsk.schema import SchemaCodec, WikibaseSchema

SCHEMA_DIR = Path(__file__).parent / "data" / "schema"


@pytest.fixture
def codec() -> SchemaCodec:
    return SchemaCodec()


@pytest.fixture
def load_schema(codec):
    """Load a schema fixture from tests/data/schema by file name."""

    def _load(name: str) -> WikibaseSchema:
        return codec.load(SCHEMA_DIR / name)

    return _load


@pytest.fixture
def make_rows():
    """Build a row source from column -> values, with optional reconciliation."""

    def _make(columns: dict[str, list[str]], matches=None, id_columns=()) -> DataFrameRowSource:
        return DataFrameRowSource(pd.DataFrame(columns), matches=matches, id_columns=id_columns)

    return _make


@pytest.fixture
def university_rows(make_rows) -> DataFrameRowSource:
    """Two universities, the second one without a reference URL."""
    return make_rows(
        {
            "subject": ["Q1377", "Q865528"],
            "inception": ["1919", "1965"],
            "reference": ["http://www.ljubljana-slovenia.com/university-ljubljana", ""],
        },
        matches={(0, "subject"): "Q1377", (1, "subject"): "Q865528"},
    )
