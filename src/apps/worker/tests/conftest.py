import pytest

from leadflow_core.jobs import JobRegistry


@pytest.fixture(autouse=True)
def sqlite_path(tmp_path, monkeypatch):
    path = tmp_path / "contacts.db"
    monkeypatch.setenv("SQLITE_PATH", str(path))
    return path


@pytest.fixture
def pauses():
    return []


@pytest.fixture
def registry(pauses):
    """Registry whose runners record pauses instead of sleeping."""
    return JobRegistry(sleep=pauses.append)


@pytest.fixture
def write_csv(tmp_path):
    def _write(name, header, rows):
        p = tmp_path / name
        lines = [",".join(header)] + [",".join(r) for r in rows]
        p.write_text("\n".join(lines) + "\n")
        return str(p)

    return _write
