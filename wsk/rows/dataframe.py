"""Row source backed by a pandas DataFrame."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Sequence

import pandas as pd

from ..datamodel.values import ENTITY_ID_PATTERN
from ..errors import ColumnNotFoundError
from .interface import RowSource


class DataFrameRowSource(RowSource):
    """Exposes the rows of a DataFrame, addressed by position.

    Reconciliation is supplied from outside, either as explicit matches
    keyed by ``(row_index, column_name)`` or as ``id_columns`` whose cell text
    already is an entity id.
    """

    def __init__(
        self,
        dataframe: pd.DataFrame,
        matches: Mapping[tuple[int, str], str] | None = None,
        id_columns: Iterable[str] = (),
    ) -> None:
        self.dataframe = dataframe.reset_index(drop=True)
        self.matches = dict(matches or {})
        self.id_columns = set(id_columns)

        missing = [col for col in self.id_columns if col not in self.dataframe.columns]
        if missing:
            raise ColumnNotFoundError(missing)

    @classmethod
    def from_csv(
        cls,
        file_path: str | Path,
        encoding: str = "utf-8",
        delimiter: str = ",",
        matches: Mapping[tuple[int, str], str] | None = None,
        id_columns: Iterable[str] = (),
    ) -> DataFrameRowSource:
        """Load every cell of a CSV file as text."""
        dataframe = pd.read_csv(
            file_path,
            encoding=encoding,
            delimiter=delimiter,
            dtype=str,
            keep_default_na=False,
        )
        return cls(dataframe, matches=matches, id_columns=id_columns)

    @staticmethod
    def load_matches(file_path: str | Path, encoding: str = "utf-8") -> dict[tuple[int, str], str]:
        """Read reconciliation matches from a CSV with ``row,column,id`` columns."""
        dataframe = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
        missing = [col for col in ("row", "column", "id") if col not in dataframe.columns]
        if missing:
            raise ColumnNotFoundError(missing)

        matches: dict[tuple[int, str], str] = {}
        for row_value, column, entity_id in dataframe[["row", "column", "id"]].itertuples(
            index=False, name=None
        ):
            entity_id = entity_id.strip()
            if not ENTITY_ID_PATTERN.match(entity_id):
                raise ValueError(f"Invalid entity id in matches file: {entity_id!r}")
            matches[(int(row_value), column.strip())] = entity_id
        return matches

    @property
    def column_names(self) -> Sequence[str]:
        return [str(column) for column in self.dataframe.columns]

    def __len__(self) -> int:
        return len(self.dataframe)

    def _column_name(self, column: str | int) -> str:
        if isinstance(column, int):
            try:
                return self.column_names[column]
            except IndexError:
                raise ColumnNotFoundError([str(column)]) from None
        if column not in self.dataframe.columns:
            raise ColumnNotFoundError([column])
        return column

    @staticmethod
    def _clean_value(value: object) -> str | None:
        """Normalize a cell (trim strings, drop NaN and empty text)."""
        if value is None:
            return None
        try:
            if pd.isna(value):  # type: ignore[arg-type]
                return None
        except (TypeError, ValueError):
            pass
        text = str(value).strip()
        return text or None

    def cell(self, row_index: int, column: str | int) -> str | None:
        name = self._column_name(column)
        return self._clean_value(self.dataframe.at[row_index, name])

    def match(self, row_index: int, column: str | int) -> str | None:
        name = self._column_name(column)
        matched = self.matches.get((row_index, name))
        if matched:
            return matched
        if name in self.id_columns:
            text = self.cell(row_index, name)
            if text and ENTITY_ID_PATTERN.match(text):
                return text
        return None
