from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_async_mongo_client():
    """Keep unit tests from constructing a real driver client."""
    with patch("mongodb_provider.manager.AsyncMongoClient") as client_class:
        yield client_class
