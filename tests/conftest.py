"""
pytest configuration and shared fixtures for the Body Map API tests.

Tests must not require a live MongoDB. We achieve this by:
  1. Patching connect_to_mongo / close_mongo_connection to no-ops so
     FastAPI's lifespan doesn't try to reach a real database.
  2. Setting db_client.client = None (disconnected) so health check
     correctly reports "disconnected" and snapshots come back empty.

Route tests that need stored symptoms override get_db with the in-memory
FakeDB below.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("RATE_LIMIT", "1000/minute")


# ── In-memory symptom store ───────────────────────────────────────────────────

class FakeCursor:
    """Supports the find().sort().limit() chain + async iteration."""

    def __init__(self, docs):
        self._docs = list(docs)

    def sort(self, key, direction):
        self._docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    def limit(self, n):
        self._docs = self._docs[:n]
        return self

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for doc in self._docs:
            yield doc


class FakeSymptomsCollection:
    def __init__(self, docs=None):
        self.docs = list(docs or [])
        self.last_query = None

    def find(self, query, projection=None):
        self.last_query = query
        user_id = query.get("user_id")
        return FakeCursor(d for d in self.docs if user_id is None or d.get("user_id") == user_id)


class FakeDB:
    def __init__(self, docs=None):
        self.symptoms = FakeSymptomsCollection(docs)

    def __getitem__(self, name):
        return self.symptoms


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
async def mock_db():
    """
    Patch the MongoDB lifecycle for every test.

    - connect_to_mongo → no-op AsyncMock (startup doesn't attempt real connection)
    - close_mongo_connection → no-op AsyncMock
    - db_client.client / db_client.db → None
    """
    with (
        patch("bodymap.core.database.connect_to_mongo", new_callable=AsyncMock),
        patch("bodymap.core.database.close_mongo_connection", new_callable=AsyncMock),
    ):
        import bodymap.core.database as db_module

        original_client = db_module.db_client.client
        original_db = db_module.db_client.db

        db_module.db_client.client = None
        db_module.db_client.db = None

        yield

        db_module.db_client.client = original_client
        db_module.db_client.db = original_db


@pytest.fixture()
async def client(mock_db):  # noqa: ARG001  (mock_db must run first)
    """HTTPX async test client wired to the FastAPI app."""
    from bodymap.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def fake_db():
    """Factory for an in-memory symptom store: fake_db([doc, ...])."""
    return FakeDB
