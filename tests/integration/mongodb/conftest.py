"""Pytest fixtures for MongoDB integration tests."""

from functools import cache

import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError

# Assumes a MongoDB container is running locally on port 27017
LOCAL_MONGO_URI = "mongodb://localhost:27017"


@cache
def server_available() -> bool:
    client = MongoClient(LOCAL_MONGO_URI, serverSelectionTimeoutMS=500)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


@pytest.fixture(autouse=True)
def require_mongo_server():
    """Skip integration tests when no local server is running."""
    if not server_available():
        pytest.skip(f"MongoDB is not reachable at {LOCAL_MONGO_URI}")
