"""Shared fixtures: test settings, an in-memory database and a GraphQL client."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from server.config import get_settings
from server.core.auth import sign_token
from server.database import SessionLocal, drop_db, init_db, init_engine


TEST_SECRET = "test-secret"
CLIENT_URL = "http://localhost:8501"


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("CLIENT_URL", CLIENT_URL)
    monkeypatch.setenv("DEBUG", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db():
    init_engine("sqlite://")
    init_db()
    session = SessionLocal()
    yield session
    session.close()
    drop_db()


@pytest.fixture
def client():
    from server.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def gql(client):
    """POST a GraphQL document and return the decoded JSON body."""

    def run(query: str, variables: dict | None = None, token: str | None = None) -> dict:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        return response.json()

    return run


@pytest.fixture
def token_for():
    def make(user) -> str:
        return sign_token(user.username, user.email, user.id)

    return make
