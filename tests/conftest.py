"""
Shared test fixtures.

The MongoDB collection is replaced with an in-memory fake, so tests never
need a running database. TestClient is used without a `with` block, which
keeps the app lifespan (and its Mongo connection) from running.
"""
import os

import pytest
from fastapi.testclient import TestClient

# Make sure nothing reaches for a real server
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "ledger_test")

from fake_collection import FakeCollection  # noqa: E402
from main import app  # noqa: E402
from routes import get_entries_collection  # noqa: E402


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def make_client():
    """Build a test client bound to the given collection."""
    def _make(collection, **kwargs):
        app.dependency_overrides[get_entries_collection] = lambda: collection
        return TestClient(app, **kwargs)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, collection):
    return make_client(collection)


@pytest.fixture
def valid_entry():
    return {
        "from": "Alice",
        "to": "Bob",
        "amount": 42.5,
        "description": "Dinner split",
    }
