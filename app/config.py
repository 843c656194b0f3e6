import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Request

BASE_DIR = Path(__file__).resolve().parent.parent  # -> project root

# Load .env explicitly from project root
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Settings:
    PROJECT_NAME = os.getenv("PROJECT_NAME", "Portfolio Backend")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite:///./portfolio.db"

    # bucket | local | git
    MEDIA_BACKEND = os.getenv("MEDIA_BACKEND", "local").strip().lower()
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    UPLOAD_URL_PREFIX = "/" + os.getenv("UPLOAD_URL_PREFIX", "/uploads").strip("/")
    UPLOAD_CACHE_MAX_AGE = int(os.getenv("UPLOAD_CACHE_MAX_AGE", 86400))
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", 50 * 1024 * 1024))
    MAX_POST_MEDIA = int(os.getenv("MAX_POST_MEDIA", 10))

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 10))

    # S3-compatible bucket (DigitalOcean Spaces or AWS S3)
    SPACES_REGION = os.getenv("SPACES_REGION")
    SPACES_ENDPOINT = os.getenv("SPACES_ENDPOINT")
    SPACES_KEY = os.getenv("SPACES_KEY")
    SPACES_SECRET = os.getenv("SPACES_SECRET")
    SPACES_NAME = os.getenv("SPACES_NAME")
    SPACES_CDN_URL = os.getenv("SPACES_CDN_URL")
    SPACES_BASE_PATH = (os.getenv("SPACES_BASE_PATH") or "").strip("/")

    # Git mirror of the upload directory
    GIT_REPO_URL = os.getenv("GIT_REPO_URL")
    GIT_ACCESS_TOKEN = os.getenv("GIT_ACCESS_TOKEN")
    GIT_USERNAME = os.getenv("GIT_USERNAME")
    GIT_USER_EMAIL = os.getenv("GIT_USER_EMAIL")
    GIT_BRANCH = os.getenv("GIT_BRANCH", "main")
    GIT_SYNC_AUTO_ENABLED = _env_flag("GIT_SYNC_AUTO_ENABLED", "true")
    GIT_PULL_INTERVAL_SECONDS = int(os.getenv("GIT_PULL_INTERVAL_SECONDS", 30))
    GIT_PUSH_INTERVAL_SECONDS = int(os.getenv("GIT_PUSH_INTERVAL_SECONDS", 60))

    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]


settings = Settings()


def get_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings
