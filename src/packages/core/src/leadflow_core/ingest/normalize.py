"""Record normalization utilities."""
from typing import Any

import pandas as pd

# Stands in for a row the parser could not line up with the header
MALFORMED_ROW = "__malformed_row__"


def normalize_record(row: dict) -> dict[str, Any]:
    """Normalize a record dict to stripped strings, dropping blank columns."""
    out = {}
    for k, v in row.items():
        if not k:
            continue
        if v is None or (isinstance(v, float) and pd.isna(v)):
            out[k] = ""
        else:
            out[k] = str(v).strip()
    return out


def is_malformed(record: dict) -> bool:
    return record.get(MALFORMED_ROW) is True


def is_blank(record: dict) -> bool:
    return not any(v for k, v in record.items() if k != MALFORMED_ROW)
