"""
Pytest configuration and fixtures for testing
"""
import os
import tempfile

# Must be set before the settings object is created on first import; the
# /uploads mount is built from UPLOADS_DIR when main is imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-portfolio-api-tests")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("UPLOADS_DIR", tempfile.mkdtemp(prefix="portfolio-uploads-"))

import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from database import Database

ADMIN_EMAIL = "admin@test.dev"
ADMIN_PASSWORD = "correct-horse-battery"
RESET_TOKEN = "operator-secret"

# Smallest valid PNG signature plus padding, enough for content sniffing
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
async def test_db(tmp_path):
    """
    Fixture that provides an isolated SQLite database session for each test.

    This fixture:
    - Creates all tables before the test runs
    - Yields a clean AsyncSession for the test
    - Disposes the engine after the test completes
    """
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}")
    await database.create_all()

    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()

    await database.dispose()


@pytest.fixture
def client(tmp_path, monkeypatch):
    """
    FastAPI TestClient with its own database file.

    Entering the client runs the application lifespan, which creates the
    tables and the admin account.
    """
    from main import app

    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "admin_reset_token", RESET_TOKEN)
    monkeypatch.setattr(settings, "seed_demo_data", False)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_token(client):
    response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return response.json()["data"]["token"]


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def make_project(client, admin_headers):
    """Create a project through the API and return its JSON representation"""

    def _make(**fields):
        data = {
            "title": "Sample Project",
            "description": "A project used in tests",
            "technologies": "Python, FastAPI",
        }
        data.update(fields)
        response = client.post("/api/projects", data=data, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]["project"]

    return _make
