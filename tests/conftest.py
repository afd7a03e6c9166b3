import asyncio
from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from subscription_tracker.app.core.config import settings
from subscription_tracker.app.core.db import init_db
from subscription_tracker.app.core.session_store import MemorySessionStore, set_session_store
from subscription_tracker.app.main import app
from subscription_tracker.app.seed_catalog import load_catalog
from subscription_tracker.app.services.catalog_service import CatalogService


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the application at an empty, migrated database."""
    path = tmp_path / "subscriptions.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    init_db()
    return path


@pytest.fixture
def session_store():
    store = MemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
    set_session_store(store)
    yield store
    set_session_store(None)


@pytest.fixture
def make_client(db_path, session_store):
    """Factory for independent browsers (each has its own cookie jar)."""
    with ExitStack() as stack:

        def factory(**kwargs) -> TestClient:
            return stack.enter_context(TestClient(app, **kwargs))

        yield factory


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def catalog(db_path):
    asyncio.run(CatalogService.seed(load_catalog(None)))


def login(client: TestClient, email: str = "alice@example.com", name: str = None) -> dict:
    payload = {"email": email}
    if name:
        payload["name"] = name
    response = client.post("/api/auth/login", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["user"]


def subscription_payload(**overrides) -> dict:
    payload = {
        "name": "Netflix",
        "category": "Streaming",
        "cost": "15.99",
        "billingCycle": "monthly",
        "renewalDate": "2025-01-15",
        "status": "active",
    }
    payload.update(overrides)
    return payload
