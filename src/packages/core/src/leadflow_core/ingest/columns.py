"""Header matching for tabular imports."""
from leadflow_core.util.errors import SourceError


def normalize_header(name) -> str:
    """Normalize a header cell so columns match by name, case-insensitively."""
    return " ".join(str(name).replace("_", " ").strip().lower().split())


def missing_columns(columns: list[str], required: list[str]) -> list[str]:
    """Return the required columns absent from a header."""
    present = {normalize_header(c) for c in columns}
    return [r for r in required if normalize_header(r) not in present]


def require_columns(columns: list[str], required: list[str]) -> None:
    """Raise SourceError if any required column is missing from the header."""
    missing = missing_columns(columns, required)
    if missing:
        raise SourceError(f"Missing required column(s): {', '.join(missing)}")
