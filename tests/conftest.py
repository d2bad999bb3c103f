"""
Pytest fixtures for the Jobster API tests.

MongoDB is never contacted: the application gets a MagicMock database whose
users/jobs collections are MagicMocks, and the real services run on top.
"""

import os
from unittest.mock import MagicMock

# IMPORTANT: Set environment variables BEFORE any imports from jobster
# so get_settings() caches the test configuration.
os.environ["JWT_SECRET_KEY"] = "test-secret-key-1234"
os.environ["BCRYPT_ROUNDS"] = "4"  # Minimum bcrypt cost keeps hashing fast
os.environ["DEMO_USER_ID"] = "63d23f7fef91ba4d41fa3416"
os.environ["AUTH_RATE_LIMIT_MAX"] = "10"
os.environ["AUTH_RATE_LIMIT_WINDOW_SECONDS"] = "900"
os.environ["FRONTEND_DIR"] = "does-not-exist"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from jobster.core.auth import create_access_token
from jobster.db.mongodb import MongoDatabase

DEMO_USER_ID = "63d23f7fef91ba4d41fa3416"


def make_cursor(docs):
    """Mimic a pymongo Cursor: chainable sort/skip/limit, iterable results."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.__iter__.return_value = iter(docs)
    return cursor


@pytest.fixture
def users_collection():
    return MagicMock()


@pytest.fixture
def jobs_collection():
    collection = MagicMock()
    collection.find.return_value = make_cursor([])
    collection.count_documents.return_value = 0
    collection.aggregate.return_value = []
    return collection


@pytest.fixture
def mock_database(users_collection, jobs_collection):
    """MongoDatabase stand-in routing collection names to the mocks above."""
    database = MagicMock(spec=MongoDatabase)
    collections = {"users": users_collection, "jobs": jobs_collection}
    database.get_collection.side_effect = lambda name: collections[name]
    database.is_connected = True
    database.ping.return_value = True
    return database


@pytest.fixture
def app(mock_database):
    """Fresh application per test (fresh rate limiter too)."""
    from jobster.main import create_app
    return create_app(database=mock_database)


@pytest.fixture
def client(app):
    """FastAPI test client fixture. Not used as a context manager, so no lifespan."""
    return TestClient(app)


@pytest.fixture
def user_id():
    return str(ObjectId())


@pytest.fixture
def auth_headers(user_id):
    """Authentication headers for a regular user."""
    return {"Authorization": f"Bearer {create_access_token(user_id, 'Tester')}"}


@pytest.fixture
def demo_headers():
    """Authentication headers for the read-only demo account."""
    return {"Authorization": f"Bearer {create_access_token(DEMO_USER_ID, 'Demo User')}"}
