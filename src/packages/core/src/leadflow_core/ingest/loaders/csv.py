"""CSV file loader."""
import csv

import pandas as pd

from leadflow_core.ingest.columns import normalize_header
from leadflow_core.ingest.loaders.base import BaseLoader
from leadflow_core.ingest.normalize import MALFORMED_ROW
from leadflow_core.util.errors import SourceError


def _flag_malformed(fields: list[str]) -> list[str]:
    return [MALFORMED_ROW]


class CSVLoader(BaseLoader):
    """Loader for CSV files (and comma-delimited .txt files).

    Every line after the header becomes a record, so blank lines and lines
    with more fields than the header are kept for the caller to report.
    """

    name = "csv"
    sep = ","

    def detect(self, head: bytes, suffix: str) -> bool:
        if suffix not in (".csv", ".txt"):
            return False
        try:
            first_line = head.decode("utf-8", errors="replace").split("\n")[0]
            if suffix == ".txt" and "\t" in first_line:
                return False
            list(csv.reader([first_line]))
            return True
        except Exception:
            return False

    def _read(self, file_path: str, nrows: int | None = None) -> pd.DataFrame:
        try:
            # The header is read as data so an over-long first row cannot be
            # taken for an index column.
            raw = pd.read_csv(
                file_path,
                sep=self.sep,
                header=None,
                dtype=str,
                keep_default_na=False,
                encoding="utf-8-sig",
                engine="python",
                skip_blank_lines=False,
                on_bad_lines=_flag_malformed,
                nrows=None if nrows is None else nrows + 1,
            )
        except pd.errors.EmptyDataError as e:
            raise SourceError(f"{self.name.upper()} file is empty or has no header row") from e
        except Exception as e:
            raise SourceError(f"{self.name.upper()} parse error: {e}") from e
        if raw.empty:
            raise SourceError(f"{self.name.upper()} file is empty or has no header row")
        df = raw.iloc[1:].reset_index(drop=True)
        df.columns = [normalize_header(c) if isinstance(c, str) else "" for c in raw.iloc[0]]
        return df
