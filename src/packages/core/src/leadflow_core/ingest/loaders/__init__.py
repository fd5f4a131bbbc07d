"""File loaders for CSV, TSV and XLSX."""
from leadflow_core.ingest.loaders.base import BaseLoader
from leadflow_core.ingest.loaders.csv import CSVLoader
from leadflow_core.ingest.loaders.tsv import TSVLoader
from leadflow_core.ingest.loaders.xlsx import XLSXLoader

__all__ = ["BaseLoader", "CSVLoader", "TSVLoader", "XLSXLoader"]
