import os

# Settings are read from the environment, set them before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_USER"] = "admin"
os.environ["ADMIN_PASS"] = "admin-pass"
os.environ["LOG_LEVEL"] = "WARNING"

import openpyxl
import pytest
from fastapi.testclient import TestClient

from trasporti.core.config import DatabaseSettings, ImportSettings, get_settings
from trasporti.infrastructure.db.connection import DatabaseManager
from trasporti.main import create_application

get_settings.cache_clear()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def client(settings):
    app = create_application(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/login", json={"username": "admin", "password": "admin-pass"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def make_workbook(tmp_path):
    """Write an .xlsx with a header row and data rows, return its path."""
    def _make(headers, rows, name="usato.xlsx"):
        workbook = openpyxl.Workbook()
        sheet = workbook.active
        sheet.append(list(headers))
        for row in rows:
            sheet.append(list(row))
        path = tmp_path / name
        workbook.save(path)
        return path

    return _make


@pytest.fixture
def import_settings(tmp_path):
    return ImportSettings(
        source_path=str(tmp_path / "usato.xlsx"),
        schema_path=str(tmp_path / "schema" / "trasporto.json"),
    )


@pytest.fixture
def memory_database():
    return DatabaseManager(DatabaseSettings(url="sqlite://"))
