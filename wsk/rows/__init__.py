"""Row sources and row filters consumed by the evaluator."""

from .dataframe import DataFrameRowSource
from .facets import EngineConfig, FacetEngine, ListFacetConfig, TextFacetConfig
from .interface import AllRows, RowFilter, RowSource, RowView

__all__ = [
    "AllRows",
    "DataFrameRowSource",
    "EngineConfig",
    "FacetEngine",
    "ListFacetConfig",
    "RowFilter",
    "RowSource",
    "RowView",
    "TextFacetConfig",
]
