"""
Tests for scripts/seed_symptoms.py.

The script is loaded from its file path with MONGO_URI set, and the Motor
client is replaced with a MagicMock, so no database is needed.

Run:
    pytest tests/test_seed_symptoms.py -v
"""

import argparse
import importlib.util
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

_SCRIPT = Path(__file__).parent.parent / "scripts" / "seed_symptoms.py"


@pytest.fixture()
def seed_module(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/bodymap")
    spec = importlib.util.spec_from_file_location("seed_symptoms", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def collection():
    coll = MagicMock()
    coll.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
    coll.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=[]))
    coll.create_index = AsyncMock()
    return coll


def _client_for(collection):
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    return client


def _args(**overrides):
    values = {"user_id": "demo-user", "count": 5, "seed": 42, "append": False}
    values.update(overrides)
    return argparse.Namespace(**values)


class TestBuildDocs:

    def test_deterministic_for_seed(self, seed_module):
        a = seed_module.build_docs("u1", 20, seed=7)
        b = seed_module.build_docs("u1", 20, seed=7)
        strip = lambda docs: [{k: v for k, v in d.items() if k != "created_at"} for d in docs]
        assert strip(a) == strip(b)

    def test_count_and_owner(self, seed_module):
        docs = seed_module.build_docs("u1", 12, seed=1)
        assert len(docs) == 12
        assert {d["user_id"] for d in docs} == {"u1"}

    def test_zero_count(self, seed_module):
        assert seed_module.build_docs("u1", 0, seed=1) == []


class TestMain:

    async def test_inserts_and_indexes(self, seed_module, collection):
        with patch.object(seed_module, "AsyncIOMotorClient", return_value=_client_for(collection)):
            await seed_module.main(_args(count=5))

        collection.delete_many.assert_awaited_once_with({"user_id": "demo-user"})
        docs = collection.insert_many.await_args.args[0]
        assert len(docs) == 5
        collection.create_index.assert_awaited_once()

    async def test_zero_count_skips_insert(self, seed_module, collection):
        with patch.object(seed_module, "AsyncIOMotorClient", return_value=_client_for(collection)):
            await seed_module.main(_args(count=0))

        collection.insert_many.assert_not_called()
        collection.create_index.assert_awaited_once()

    async def test_append_keeps_existing(self, seed_module, collection):
        with patch.object(seed_module, "AsyncIOMotorClient", return_value=_client_for(collection)):
            await seed_module.main(_args(append=True))

        collection.delete_many.assert_not_called()
