from __future__ import annotations

import os
import tempfile

# Set test environment BEFORE importing app modules.
# app.db creates the engine at module level using get_settings().db_url,
# so we must override the env vars before any app imports.
_test_tmp = tempfile.mkdtemp(prefix="memos-test-")
os.environ.setdefault("DATA_DIR", os.path.join(_test_tmp, "data"))
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-integration-tests-only")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.config import get_settings
from app.db import get_session
from app.main import app as fastapi_app
from app.models.resource import Resource
from app.models.user import ROLE_HOST, ROLE_USER, User
from app.security import Principal, create_access_token


# ── Database fixtures ─────────────────────────────────────────────────


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool so every connection shares the same in-memory database.
    Recreates tables per test for full isolation.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a fresh session per test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="settings")
def settings_fixture():
    return get_settings()


# ── HTTP client fixtures ──────────────────────────────────────────────


@pytest.fixture(name="client")
def client_fixture(session):
    """FastAPI TestClient with overridden DB session and no credentials."""

    def _get_session_override():
        yield session

    fastapi_app.dependency_overrides[get_session] = _get_session_override
    with TestClient(fastapi_app) as client:
        yield client
    fastapi_app.dependency_overrides.clear()


# ── Users and principals ──────────────────────────────────────────────


def _make_user(session: Session, username: str, role: str = ROLE_USER) -> User:
    user = User(username=username, role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="alice")
def alice_fixture(session) -> User:
    return _make_user(session, "alice")


@pytest.fixture(name="bob")
def bob_fixture(session) -> User:
    return _make_user(session, "bob")


@pytest.fixture(name="host")
def host_fixture(session) -> User:
    return _make_user(session, "admin", role=ROLE_HOST)


@pytest.fixture(name="principal_for")
def principal_for_fixture():
    """Build the Principal a valid token for `user` resolves to."""

    def _principal(user: User) -> Principal:
        return Principal(uid=user.uid, username=user.username, role=user.role, user_id=user.id)

    return _principal


@pytest.fixture(name="headers_for")
def headers_for_fixture():
    """Build Authorization headers carrying a real access token for `user`."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(user.uid, user.username, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


# ── Resources ─────────────────────────────────────────────────────────


@pytest.fixture(name="make_resource")
def make_resource_fixture(session):
    """Factory inserting a resource row and returning it."""

    def _make(uid: str, filename: str = "file.png", **kwargs) -> Resource:
        resource = Resource(
            uid=uid,
            filename=filename,
            type=kwargs.pop("type", "image/png"),
            size=kwargs.pop("size", 1024),
            **kwargs,
        )
        session.add(resource)
        session.commit()
        session.refresh(resource)
        return resource

    return _make
