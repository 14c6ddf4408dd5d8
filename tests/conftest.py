# tests/conftest.py

from __future__ import annotations

import os

# Must be set before tasktracker is imported: the engine is built at import time.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TOKEN_SECRET"] = "test-secret"

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tasktracker import auth
from tasktracker.db import Base, SessionLocal, engine
from tasktracker.main import app
from tasktracker.security import AuthenticatedUserId


@pytest.fixture(autouse=True)
def _schema() -> Iterator[None]:
    """Fresh tables for every test (one shared in-memory database)."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture()
def db() -> Iterator[Session]:
    with SessionLocal() as session:
        yield session


@pytest.fixture()
def client() -> TestClient:
    # Not used as a context manager: the lifespan would reconfigure logging.
    return TestClient(app)


@pytest.fixture()
def alice(db: Session) -> AuthenticatedUserId:
    user = auth.register(db, "alice@example.com", "s3cret")
    return AuthenticatedUserId(user.id)


@pytest.fixture()
def bob(db: Session) -> AuthenticatedUserId:
    user = auth.register(db, "bob@example.com", "hunter2")
    return AuthenticatedUserId(user.id)


@pytest.fixture()
def login_as(client: TestClient) -> Callable[[str, str], dict[str, str]]:
    """Register (ignoring duplicates) and log in through the API; returns auth headers."""

    def _login(email: str, password: str) -> dict[str, str]:
        client.post("/api/register", json={"email": email, "password": password})
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login
