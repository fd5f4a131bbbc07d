"""Ingest module for tabular file parsing."""
from leadflow_core.ingest.preview import (
    SUPPORTED_SUFFIXES,
    detect_format,
    get_loader,
    load_records,
    preview_records,
    read_columns,
)
from leadflow_core.ingest.columns import normalize_header, require_columns

__all__ = [
    "SUPPORTED_SUFFIXES",
    "detect_format",
    "get_loader",
    "load_records",
    "preview_records",
    "read_columns",
    "normalize_header",
    "require_columns",
]
