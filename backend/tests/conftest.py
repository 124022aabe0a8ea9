"""Shared test fixtures for the Biodata Manager backend test suite.

Tests run against a throwaway SQLite database (override with
TEST_DATABASE_URL). Each test starts from empty tables: rows of the
service's own tables are deleted and any table created through the table
editor is dropped.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="biodata-tests-")

# Force auth and seeding off and use the test database before any app imports.
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL",
    f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}",
)
os.environ["AUTH_ENABLED"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")

import pytest
from sqlalchemy import inspect, text
from fastapi.testclient import TestClient

from biodata.database import Base, SessionLocal, engine, get_db
from biodata.main import app
from biodata.core.config import settings
from biodata.core.token_factory import create_token
from biodata.middleware.request_context import _rate_buckets
from biodata.models import User
from biodata.services.auth_service import hash_password


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty the ORM tables and drop ad-hoc tables before each test.

    Runs before the test (not after) so failures leave data around for
    debugging.
    """
    orm_tables = set(Base.metadata.tables)
    preparer = engine.dialect.identifier_preparer
    with engine.begin() as conn:
        for table in inspect(conn).get_table_names():
            if table not in orm_tables:
                conn.execute(text(f"DROP TABLE {preparer.quote_identifier(table)}"))
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(db):
    """FastAPI TestClient with the DB dependency overridden to use the test session."""

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    _rate_buckets.clear()  # Reset rate limiter so tests don't hit 429
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def upload_dir() -> str:
    return settings.upload_dir


@pytest.fixture()
def user(db) -> User:
    """A local password user (password: ``secret-pass``)."""
    account = User(
        email="alice@example.com",
        name="Alice",
        password_hash=hash_password("secret-pass"),
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


@pytest.fixture()
def auth_headers(user) -> dict:
    """Valid local-token headers for *user* (for tests that enable auth)."""
    token = create_token(
        user_id=user.id,
        email=user.email,
        secret=settings.jwt_secret_key,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_enabled(monkeypatch):
    monkeypatch.setattr(settings, "auth_enabled", True)


def make_folder(client, name: str, parent_id=None) -> dict:
    """Create a folder through the API and return its JSON."""
    resp = client.post("/folders", json={"name": name, "parentId": parent_id})
    assert resp.status_code == 201, resp.text
    return resp.json()


def make_upload(client, name: str = "notes.txt", content: bytes = b"hello", **form) -> dict:
    """Upload a file through the API and return its JSON."""
    data = {k: str(v) for k, v in form.items() if v is not None}
    resp = client.post(
        "/files/upload",
        files={"file": (name, content, "text/plain")},
        data=data,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
