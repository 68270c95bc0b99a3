"""Shared fixtures for the marketplace test suite."""

from typing import Any, Dict, Tuple

import pytest
from fastapi.testclient import TestClient

from assistant_marketplace_api.app.core.config import settings
from assistant_marketplace_api.app.core.security import hash_password
from assistant_marketplace_api.app.main import create_app
from assistant_marketplace_api.app.models import Role
from assistant_marketplace_api.app.storage import MemoryStorage, SqliteStorage

API = "/api/v1"

ADMIN_USERNAME = "root"
ADMIN_PASSWORD = "rootpass"


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """A fresh record store of each kind."""
    if request.param == "memory":
        return MemoryStorage()
    return SqliteStorage(str(tmp_path / "marketplace.db"))


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, tmp_path):
    """Store behind the HTTP client; every API test runs on both backends."""
    if request.param == "memory":
        return MemoryStorage()
    return SqliteStorage(str(tmp_path / "api.db"))


@pytest.fixture
def client(storage, monkeypatch):
    """HTTP client for an app with a configured administrator."""
    monkeypatch.setattr(settings, "admin_username", ADMIN_USERNAME)
    monkeypatch.setattr(settings, "admin_email", "root@mail.com")
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    with TestClient(create_app(storage=storage)) as test_client:
        yield test_client


def user_payload(username: str, role: str = "client", **extra: Any) -> Dict[str, Any]:
    payload = {
        "username": username,
        "email": f"{username}@mail.com",
        "password": "secret123",
        "full_name": username.title(),
        "role": role,
    }
    payload.update(extra)
    return payload


def login(client: TestClient, username: str, password: str = "secret123") -> Dict[str, str]:
    """Log in and return bearer headers; the cookie jar is left empty."""
    response = client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def register_and_login(
    client: TestClient, username: str, role: str = "client", **extra: Any
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    response = client.post(f"{API}/auth/register", json=user_payload(username, role, **extra))
    assert response.status_code == 201, response.text
    return response.json(), login(client, username)


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_USERNAME, ADMIN_PASSWORD)


async def make_user(store, username: str, role: Role = Role.CLIENT, **extra: Any):
    """Create a user directly in a store."""
    data = {
        "username": username,
        "email": f"{username}@mail.com",
        "full_name": username.title(),
        "role": role,
        "password_hash": hash_password("secret123"),
    }
    data.update(extra)
    return await store.create_user(data)
