"""
CivicMap Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── store_data: per-collection documents the fake store serves
    ├── fake_store: DocumentStore stand-in built on AsyncMock (no MongoDB needed)
    ├── welcome_file: temporary welcome.txt wired into settings
    └── test_client: HTTPX AsyncClient talking to the FastAPI app in-process
"""

import os

# Override settings for testing BEFORE any civicmap imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MONGODB_URL"] = "mongodb://test-host:27017"
os.environ["STORE_CONNECT_ATTEMPTS"] = "1"

from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from civicmap.config import settings
from civicmap.database import DocumentStore


# ══════════════════════════════════════════════════════════════════════════
# Sample Documents (as stored in MongoDB)
# ══════════════════════════════════════════════════════════════════════════

OUTER_RING = [
    [121.5000, 25.0000],
    [121.5002, 25.0000],
    [121.5002, 25.0001],
    [121.5000, 25.0001],
    [121.5000, 25.0000],
]
HOLE_RING = [
    [121.50005, 25.00002],
    [121.50010, 25.00002],
    [121.50010, 25.00005],
    [121.50005, 25.00002],
]


def make_parking_doc(**overrides: Any) -> Dict[str, Any]:
    """A parklocations document in the current schema revision."""
    doc = {
        "_id": "65f0c0ffee0000000000abcd",
        "parking_id": "P-001",
        "road": "Zhongshan Rd",
        "parktype": "car",
        "valid": True,
        "location": {"type": "Polygon", "coordinates": [OUTER_RING]},
    }
    doc.update(overrides)
    return doc


# ══════════════════════════════════════════════════════════════════════════
# Fake Document Store
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def store_data() -> Dict[str, List[Dict[str, Any]]]:
    """
    Documents served by fake_store, keyed by collection name.

    Usage:
        def test_something(store_data, ...):
            store_data["bulletins"].append({"_id": "x", "id": 1, ...})
    """
    return {
        settings.bulletins_collection: [],
        settings.locations_collection: [],
        settings.parking_collection: [],
    }


@pytest.fixture
def fake_store(store_data):
    """
    Provides a mock DocumentStore.

    What:    find_all serves store_data and honours the `exclude` projection
             the way MongoDB does; ping and close are plain AsyncMocks.
    """

    def find_all(collection: str, exclude: Optional[Sequence[str]] = None):
        excluded = set(exclude or [])
        return [
            {key: value for key, value in doc.items() if key not in excluded}
            for doc in store_data.get(collection, [])
        ]

    store = MagicMock(spec=DocumentStore)
    store.find_all = AsyncMock(side_effect=find_all)
    store.ping = AsyncMock(return_value=None)
    store.close = AsyncMock(return_value=None)
    return store


@pytest.fixture
def welcome_file(tmp_path, monkeypatch):
    """Writes a welcome file in a temp dir and points settings at it."""
    path = tmp_path / "welcome.txt"
    path.write_text("Welcome to the parking map!\n", encoding="utf-8")
    monkeypatch.setattr(settings, "welcome_file_path", str(path))
    return path


@pytest_asyncio.fixture
async def test_client(fake_store):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     ASGITransport routes requests straight into the app. The lifespan
             does not run, so the fake store is placed on app.state directly.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from civicmap.main import app

    app.state.store = fake_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    del app.state.store
