import threading

import pytest

from leadflow_core.jobs import JobDefinition, JobKind, BatchPolicy, Accept, Succeeded


@pytest.fixture(autouse=True)
def sqlite_path(tmp_path, monkeypatch):
    """Point the contact store at a throwaway database."""
    path = tmp_path / "contacts.db"
    monkeypatch.setenv("SQLITE_PATH", str(path))
    return path


@pytest.fixture
def make_definition():
    """Build an in-memory job that accepts every record and records flushes."""

    def factory(records, *, classify=None, flush=None, policy=None, load=None, kind=JobKind.IMPORT):
        flushed: list[list] = []

        def default_flush(batch):
            flushed.append(list(batch))
            return [Succeeded(item) for item in batch]

        definition = JobDefinition(
            kind=kind,
            load=load or (lambda: list(records)),
            classify=classify or (lambda record, index: Accept(record)),
            flush=flush or default_flush,
            policy=policy or BatchPolicy(size=50, delay_seconds=0),
        )
        definition.flushed = flushed
        return definition

    return factory


@pytest.fixture
def gate():
    return threading.Event()
