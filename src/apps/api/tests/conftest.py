import pytest
from fastapi.testclient import TestClient

from leadflow_api.main import create_app
from leadflow_api.settings import Settings


@pytest.fixture
def settings(tmp_path, monkeypatch):
    db = str(tmp_path / "contacts.db")
    monkeypatch.setenv("SQLITE_PATH", db)
    return Settings(
        sqlite_path=db,
        upload_dir=str(tmp_path / "uploads"),
        send_batch_delay_seconds=0,
        max_upload_mb=1,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
