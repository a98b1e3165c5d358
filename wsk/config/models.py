"""Pydantic models for configuration validation."""

from typing import Any
from pydantic import BaseModel, Field


class CSVFileConfig(BaseModel):
    """Table the schema is evaluated against."""

    file_path: str = Field(..., description="Path to the CSV file")
    encoding: str = Field("utf-8", description="File encoding")
    delimiter: str = Field(",", description="Field delimiter")


class ReconciliationConfig(BaseModel):
    """Where cell-to-entity matches come from."""

    id_columns: list[str] = Field(
        default_factory=list,
        description="Columns whose cells already hold entity ids",
    )
    matches_path: str | None = Field(
        None, description="CSV file with row,column,id matches"
    )


class ProjectConfig(BaseModel):
    """Main project configuration."""

    name: str = Field(..., description="Project name")
    description: str | None = Field(None, description="Project description")

    schema_path: str = Field(..., description="Path to the schema JSON document")
    csv: CSVFileConfig = Field(..., description="Input table")
    reconciliation: ReconciliationConfig = Field(
        default_factory=ReconciliationConfig, description="Reconciliation source"
    )
    engine: dict[str, Any] | None = Field(
        None, description="Facet engine configuration selecting rows"
    )
    output_path: str | None = Field(None, description="Where to write item updates")
