# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- a fresh in-memory store per test
- a SQLite-backed store in a temp directory
- a TestClient around an app built on the in-memory store
- helpers to register users and get auth headers
"""

import os

# Must be set before trafficx.config is imported
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from trafficx.main import create_app
from trafficx.storage.database import DatabaseStorage
from trafficx.storage.memory import MemStorage


@pytest.fixture()
def storage():
    return MemStorage()


@pytest.fixture()
async def db_storage(tmp_path):
    """A DatabaseStorage on a throwaway SQLite file, tables created."""
    store = DatabaseStorage(f"sqlite+aiosqlite:///{tmp_path / 'trafficx.db'}")
    await store.init()
    yield store
    await store.close()


@pytest.fixture()
def app(storage):
    return create_app(storage=storage)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def register(client):
    """Register a user through the API and return its bearer headers."""

    def _register(username: str, password: str = "secret-pass"):
        resp = client.post("/api/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.text
        token = resp.json()["access_token"]
        # Tests authenticate with explicit headers, not the login cookie
        client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture()
def alice(register):
    return register("alice")


@pytest.fixture()
def bob(register):
    return register("bob")
