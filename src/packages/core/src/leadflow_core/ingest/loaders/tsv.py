"""TSV file loader."""
import csv

from leadflow_core.ingest.loaders.csv import CSVLoader


class TSVLoader(CSVLoader):
    """Loader for TSV (tab-separated values) files."""

    name = "tsv"
    sep = "\t"

    def detect(self, head: bytes, suffix: str) -> bool:
        if suffix not in (".tsv", ".txt"):
            return False
        try:
            text = head.decode("utf-8", errors="replace")
            first_line = text.split("\n")[0]
            # TSV should have at least one tab in the header
            if "\t" not in first_line:
                return False
            list(csv.reader([first_line], delimiter="\t"))
            return True
        except Exception:
            return False
