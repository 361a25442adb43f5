from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

# Ensure auth mode + secrets are set before app import
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("AUTH_MODE", "jwt")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum")
os.environ.setdefault("REFRESH_TOKEN_PEPPER", "test_refresh_pepper")
os.environ.setdefault("ACCESS_TOKEN_TTL_SECONDS", "900")
os.environ.setdefault("REFRESH_TOKEN_TTL_DAYS", "30")
os.environ.setdefault("ENV", "local")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("DEV_ROUTES_ENABLED", "true")
os.environ.pop("DEV_API_KEY", None)

from localconnect.main import app  # noqa: E402
from localconnect.db import SessionLocal, engine  # noqa: E402
from localconnect.models import Base  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db():
    # Ensure a clean slate for each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
