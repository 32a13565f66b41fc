"""Central test fixtures - imports the minimal host from tests.fixtures."""

from typing import Any

import pytest

from mongodb_provider import SettingsConfigManager
from tests.fixtures.host import HostApplication, RecordingContainer


@pytest.fixture
def mongo_section() -> dict[str, Any]:
    """Provide a partial mongodb section as a host would configure it."""
    return {
        "uri": "mongodb://localhost:27017",
        "database": "testdb",
        "connect_timeout": 10000,
        "max_pool_size": 10,
        "min_pool_size": 1,
        "socket_timeout": 5000,
        "write_concern": {"w": 1, "journal": False, "w_timeout": 0},
    }


@pytest.fixture
def container(mongo_section: dict[str, Any]) -> RecordingContainer:
    """Create a container with a config service registered."""
    container = RecordingContainer()
    container.instance("config", SettingsConfigManager(mongodb=mongo_section))
    container.published.clear()
    return container


@pytest.fixture
def app(container: RecordingContainer) -> HostApplication:
    """Create a host application around the container."""
    return HostApplication(container)
