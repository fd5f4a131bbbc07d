"""Base loader interface."""
from abc import ABC, abstractmethod
from typing import Any

import pandas as pd

from leadflow_core.ingest.normalize import MALFORMED_ROW, normalize_record


class BaseLoader(ABC):
    """Tabular loader: one header row, one record per following row.

    Subclasses parse the file into a DataFrame whose columns are already
    normalized headers; the records handed to jobs are plain dicts of
    stripped strings.
    """

    name: str = ""

    @abstractmethod
    def detect(self, head: bytes, suffix: str) -> bool:
        """Detect if this loader can handle the file."""

    @abstractmethod
    def _read(self, file_path: str, nrows: int | None = None) -> pd.DataFrame:
        """Parse the file; raises SourceError when it cannot be read."""

    def columns(self, file_path: str, options: dict) -> list[str]:
        return [c for c in self._read(file_path, nrows=0).columns if c]

    def load(self, file_path: str, options: dict) -> list[dict[str, Any]]:
        return self._records(self._read(file_path))

    def preview(self, file_path: str, options: dict, max_rows: int = 25) -> list[dict[str, Any]]:
        return self._records(self._read(file_path, nrows=max_rows))

    @staticmethod
    def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
        columns = list(df.columns)
        records = []
        for values in df.itertuples(index=False, name=None):
            if values and values[0] == MALFORMED_ROW:
                records.append({MALFORMED_ROW: True})
            else:
                records.append(normalize_record(dict(zip(columns, values))))
        return records
