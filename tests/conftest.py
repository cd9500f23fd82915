"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config.settings import Settings
from services.container import build_services


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id and email."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


@pytest.fixture
def test_settings():
    """Settings for an isolated in-memory backend with cheap password hashing."""
    return Settings(
        _env_file=None,
        DATABASE_BACKEND="memory",
        BCRYPT_ROUNDS=4,
        JWT_SECRET="test-secret",
        ENVIRONMENT="test",
        DEBUG=False,
    )


@pytest.fixture
async def services(test_settings):
    """Started services over a fresh in-memory database."""
    services = build_services(test_settings)
    await services.startup()
    yield services
    await services.shutdown()


@pytest.fixture
def client(test_settings):
    """Create a test client for an app wired to a fresh in-memory database."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register a user and return auth headers with user info."""
    response = client.post(
        "/api/auth/register",
        json={"email": "a@x.com", "password": "secret1", "name": "Ann"},
    )
    assert response.status_code == 201
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )
