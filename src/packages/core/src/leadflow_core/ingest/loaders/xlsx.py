"""Excel workbook loader (first sheet only)."""
import zipfile

import pandas as pd

from leadflow_core.ingest.columns import normalize_header
from leadflow_core.ingest.loaders.base import BaseLoader
from leadflow_core.util.errors import SourceError

ZIP_MAGIC = b"PK\x03\x04"


class XLSXLoader(BaseLoader):
    """Loader for .xlsx workbooks, read through openpyxl."""

    name = "xlsx"

    def detect(self, head: bytes, suffix: str) -> bool:
        return suffix == ".xlsx" and head.startswith(ZIP_MAGIC)

    def _read(self, file_path: str, nrows: int | None = None) -> pd.DataFrame:
        try:
            df = pd.read_excel(
                file_path,
                sheet_name=0,
                dtype=str,
                keep_default_na=False,
                engine="openpyxl",
                nrows=nrows,
            )
        except (zipfile.BadZipFile, ValueError, OSError, KeyError) as e:
            raise SourceError(f"XLSX parse error: {e}") from e
        # Blank header cells come back as "Unnamed: N"
        df.columns = [
            "" if str(c).startswith("Unnamed:") else normalize_header(c) for c in df.columns
        ]
        return df
