"""
Shared fixtures for the wall API tests.

Each test gets its own in-memory SQLite database. StaticPool keeps a single
connection so the TestClient's worker threads all see the same schema, where
plain sqlite:// would hand each thread an empty database.

Environment overrides must be set before any wall module is imported, since
settings are read once at import time.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="wall-uploads-"))
os.environ.setdefault("ENABLE_SCHEDULER", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wall.api.dependencies import get_storage
from wall.core.database import get_db, metadata
from wall.main import app
from wall.repositories import tables  # noqa: F401
from wall.storage.local_storage import LocalStorage


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def upload_storage(tmp_path):
    return LocalStorage(upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def app_overrides(session_factory, upload_storage):
    """Point the app's database and storage dependencies at the test fixtures"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: upload_storage
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_overrides):
    # No context manager: the lifespan (table creation, scheduler) is not needed here
    return TestClient(app_overrides)


def register(client: TestClient, email: str = "alice@x.com", password: str = "pw123") -> dict:
    resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
