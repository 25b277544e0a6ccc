from __future__ import annotations

import os

# The app builds its engine at import time; point it at SQLite first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from main import app
from poetportal.crud import user as user_crud
from poetportal.db.base import Base
from poetportal.db.session import build_engine, get_db
from poetportal.schemas.user import UserCreate


@pytest.fixture()
def session_factory():
    engine = build_engine("sqlite://")
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db_session):
    def _make_user(username: str, password: str = "secret123", is_admin: bool = False, display_name=None):
        return user_crud.create_user(
            db_session,
            UserCreate(username=username, password=password, display_name=display_name),
            is_admin=is_admin,
        )

    return _make_user


@pytest.fixture()
def register(client):
    """Register through the API; returns (auth headers, user json)."""

    def _register(username: str, password: str = "secret123", display_name=None):
        response = client.post(
            "/api/register",
            json={"username": username, "password": password, "display_name": display_name},
        )
        assert response.status_code == 200, response.text
        payload = response.json()
        return {"Authorization": f"Bearer {payload['token']}"}, payload["user"]

    return _register
