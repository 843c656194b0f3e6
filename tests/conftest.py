import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure predictable environment variables for tests before importing the app.
BASE_DIR = Path(__file__).resolve().parents[1]

if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="portfolio-db-"), "test.db"))
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="portfolio-uploads-"))
os.environ.setdefault("MEDIA_BACKEND", "local")
os.environ.setdefault("GIT_SYNC_AUTO_ENABLED", "false")

from app.config import Settings  # noqa: E402  (import after env vars are set)
from app.main import create_app  # noqa: E402


@pytest.fixture()
def app_settings(tmp_path):
    """Settings pointing at a throwaway database and upload directory."""
    test_settings = Settings()
    test_settings.DATABASE_URL = f"sqlite:///{tmp_path / 'test.db'}"
    test_settings.MEDIA_BACKEND = "local"
    test_settings.UPLOAD_DIR = str(tmp_path / "uploads")
    test_settings.GIT_SYNC_AUTO_ENABLED = False
    test_settings.GIT_REPO_URL = "https://example.test/media.git"
    return test_settings


@pytest.fixture()
def client(app_settings):
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture()
def db_session(client):
    session = client.app.state.database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
