"""A small facet engine selecting rows from an OpenRefine-style configuration.

Example configuration::

    {
      "mode": "row-based",
      "facets": [
        {"type": "text", "columnName": "reference", "query": "www",
         "mode": "text", "caseSensitive": false, "invert": false}
      ]
    }

Supported facets are ``text`` (substring or regex search) and ``list``
(selection of exact cell values). In ``record-based`` mode a record starts at
every row whose first column is non-blank, and a record is kept when each
facet matches at least one of its rows.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .interface import RowFilter, RowSource, RowView


class TextFacetConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["text"]
    column_name: str = Field(..., alias="columnName")
    query: str | None = None
    mode: Literal["text", "regex"] = "text"
    case_sensitive: bool = Field(False, alias="caseSensitive")
    invert: bool = False
    name: str | None = None

    @model_validator(mode="after")
    def check_regex(self) -> TextFacetConfig:
        if self.mode == "regex" and self.query:
            try:
                re.compile(self.query)
            except re.error as exc:
                raise ValueError(f"Invalid regular expression {self.query!r}: {exc}") from exc
        return self


class ListChoice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    v: Any
    l: str | None = None


class ListSelection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    v: ListChoice


class ListFacetConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["list"]
    column_name: str = Field(..., alias="columnName")
    selection: list[ListSelection] = Field(default_factory=list)
    select_blank: bool = Field(False, alias="selectBlank")
    invert: bool = False
    name: str | None = None


FacetConfig = Annotated[
    Union[TextFacetConfig, ListFacetConfig], Field(discriminator="type")
]


class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: Literal["row-based", "record-based"] = "row-based"
    facets: list[FacetConfig] = Field(default_factory=list)


class Facet(ABC):
    """Row predicate built from one facet configuration."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether the facet restricts anything at all."""
        pass

    @abstractmethod
    def matches(self, row: RowView) -> bool:
        pass


class TextFacet(Facet):
    def __init__(self, config: TextFacetConfig) -> None:
        self.config = config
        self._pattern: re.Pattern[str] | None = None
        if config.query:
            flags = 0 if config.case_sensitive else re.IGNORECASE
            query = config.query if config.mode == "regex" else re.escape(config.query)
            self._pattern = re.compile(query, flags)

    @property
    def active(self) -> bool:
        return self._pattern is not None

    def matches(self, row: RowView) -> bool:
        if self._pattern is None:
            return True
        text = row.cell(self.config.column_name)
        found = text is not None and self._pattern.search(text) is not None
        return found != self.config.invert


class ListFacet(Facet):
    def __init__(self, config: ListFacetConfig) -> None:
        self.config = config
        self._values = {str(choice.v.v) for choice in config.selection}

    @property
    def active(self) -> bool:
        return bool(self._values) or self.config.select_blank

    def matches(self, row: RowView) -> bool:
        if not self.active:
            return True
        text = row.cell(self.config.column_name)
        if text is None:
            selected = self.config.select_blank
        else:
            selected = text in self._values
        return selected != self.config.invert


def build_facet(config: TextFacetConfig | ListFacetConfig) -> Facet:
    if isinstance(config, TextFacetConfig):
        return TextFacet(config)
    return ListFacet(config)


class FacetEngine(RowFilter):
    """Row filter combining facets over a row source."""

    def __init__(
        self,
        rows: RowSource,
        config: EngineConfig | Mapping[str, Any] | None = None,
    ) -> None:
        self.rows = rows
        self.config = EngineConfig()
        self.facets: list[Facet] = []
        self._record_rows: set[int] | None = None
        if config is not None:
            self.initialize(config)

    def initialize(self, config: EngineConfig | Mapping[str, Any]) -> None:
        """(Re)configure the engine; raises ``ValidationError`` on bad input."""
        if not isinstance(config, EngineConfig):
            config = EngineConfig.model_validate(config)
        self.config = config
        self.facets = [build_facet(facet) for facet in config.facets]
        self._record_rows = None

    def includes(self, row_index: int) -> bool:
        if self.config.mode == "record-based":
            if self._record_rows is None:
                self._record_rows = self._compute_record_rows()
            return row_index in self._record_rows
        row = self.rows.row(row_index)
        return all(facet.matches(row) for facet in self.facets)

    def _records(self) -> list[list[int]]:
        records: list[list[int]] = []
        key_column = 0
        for index in range(len(self.rows)):
            if not records or self.rows.cell(index, key_column) is not None:
                records.append([index])
            else:
                records[-1].append(index)
        return records

    def _compute_record_rows(self) -> set[int]:
        included: set[int] = set()
        for record in self._records():
            views = [self.rows.row(index) for index in record]
            if all(any(facet.matches(view) for view in views) for facet in self.facets):
                included.update(record)
        return included
