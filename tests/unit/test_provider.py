"""Unit tests for MongoDBServiceProvider."""

import logging
from unittest.mock import MagicMock

import pytest

from mongodb_provider import (
    ConfigCapabilityMissingError,
    ConfigDecodeError,
    MongoDBManager,
    MongoDBServiceProvider,
    NullApplicationError,
    NullContainerError,
    ServiceProvider,
)
from tests.fixtures.host import HostApplication, RecordingContainer

EXPECTED_SERVICES = ["mongodb", "mongodb.client", "mongodb.database"]


@pytest.fixture
def provider() -> MongoDBServiceProvider:
    return MongoDBServiceProvider()


@pytest.fixture
def mock_container():
    """Create a mock container with a mock config service."""
    container = MagicMock()
    container.bound.return_value = True
    container.make.return_value = MagicMock()
    return container


@pytest.fixture
def mock_app(mock_container):
    app = MagicMock()
    app.container = mock_container
    return app


def test_provider_satisfies_service_provider_protocol(provider):
    """Test that the provider has the two-phase contract methods."""
    assert isinstance(provider, ServiceProvider)


def test_requires_config_only(provider):
    """Test that the only declared dependency is the config service."""
    assert provider.requires() == ["config"]


def test_providers_empty_before_register(provider):
    """Test that nothing is recorded before register runs."""
    assert provider.providers() == []


def test_register_publishes_services_in_order(provider, mock_app, mock_container):
    """Test that three services are published once each, in a fixed order."""
    provider.register(mock_app)

    mock_container.make.assert_called_once_with("config")
    names = [c.args[0] for c in mock_container.instance.call_args_list]
    assert names == EXPECTED_SERVICES
    assert provider.providers() == EXPECTED_SERVICES


def test_register_decodes_mongodb_section(provider, mock_app, mock_container):
    """Test that the config service decodes the mongodb key."""
    provider.register(mock_app)

    config_service = mock_container.make.return_value
    key, target = config_service.unmarshal_key.call_args.args
    assert key == "mongodb"
    assert target.database == "myapp"


def test_register_with_real_config(provider, app, container, mock_async_mongo_client):
    """Test that published services reflect the resolved configuration."""
    provider.register(app)

    assert container.published == EXPECTED_SERVICES
    manager = container.make("mongodb")
    assert isinstance(manager, MongoDBManager)
    assert container.make("mongodb.client") is mock_async_mongo_client.return_value
    assert container.make("mongodb.database") is manager.database
    mock_async_mongo_client.return_value.__getitem__.assert_called_with("testdb")

    # Overlaid values
    assert manager.config.database == "testdb"
    assert manager.config.max_pool_size == 10
    assert manager.config.write_concern.w == 1
    assert manager.config.write_concern.journal is False
    # Defaults for everything the section leaves out
    assert manager.config.max_connecting == 10
    assert manager.config.auth.auth_mechanism == "SCRAM-SHA-256"
    assert manager.config.read_concern.level == "majority"


def test_register_does_not_connect(provider, app, mock_async_mongo_client):
    """Test that registration never performs I/O on the client."""
    provider.register(app)

    client = mock_async_mongo_client.return_value
    assert mock_async_mongo_client.call_args.kwargs["connect"] is False
    client.admin.command.assert_not_called()


def test_register_none_app(provider):
    """Test that register rejects a missing application."""
    with pytest.raises(NullApplicationError):
        provider.register(None)


def test_register_app_without_container(provider):
    """Test that register rejects an application without a container."""
    with pytest.raises(NullContainerError):
        provider.register(HostApplication(None))

    assert provider.providers() == []


def test_register_config_not_bound(provider):
    """Test that register fails when the config service is missing."""
    container = RecordingContainer()

    with pytest.raises(ConfigCapabilityMissingError, match="'config'"):
        provider.register(HostApplication(container))

    assert container.published == []
    assert provider.providers() == []


def test_register_config_make_error(provider, mock_app, mock_container):
    """Test that register fails when the config service cannot be resolved."""
    mock_container.make.side_effect = RuntimeError("make error")

    with pytest.raises(ConfigCapabilityMissingError, match="make error"):
        provider.register(mock_app)

    mock_container.instance.assert_not_called()


def test_register_config_wrong_type(provider, container, app, caplog):
    """Test that a config entry that cannot decode sections is rejected."""
    container.services["config"] = {"mongodb": {}}

    with caplog.at_level(logging.ERROR, logger="mongodb_provider.provider"):
        with pytest.raises(ConfigCapabilityMissingError, match="dict"):
            provider.register(app)

    assert container.published == []
    assert "cannot decode configuration sections" in caplog.text


def test_register_decode_error(provider, mock_app, mock_container):
    """Test that decode failures abort register and keep the message."""
    config_service = mock_container.make.return_value
    config_service.unmarshal_key.side_effect = ValueError("invalid max_pool_size")

    with pytest.raises(ConfigDecodeError, match="invalid max_pool_size"):
        provider.register(mock_app)

    mock_container.instance.assert_not_called()
    assert provider.providers() == []


def test_register_invalid_section(provider, container, app):
    """Test that invalid configuration values abort register."""
    container.services["config"].mongodb["max_pool_size"] = -1

    with pytest.raises(ConfigDecodeError):
        provider.register(app)

    assert container.published == []


def test_register_twice_records_duplicates(provider, app, container):
    """Test that register is not idempotent."""
    provider.register(app)
    first_manager = container.make("mongodb")
    provider.register(app)

    assert provider.providers() == EXPECTED_SERVICES + EXPECTED_SERVICES
    assert container.published == EXPECTED_SERVICES + EXPECTED_SERVICES
    assert container.make("mongodb") is not first_manager


def test_providers_returns_a_copy(provider, app):
    """Test that callers cannot alter the provider's record."""
    provider.register(app)
    provider.providers().clear()

    assert provider.providers() == EXPECTED_SERVICES


def test_boot_after_register(provider, app, container):
    """Test that boot succeeds and publishes nothing further."""
    provider.register(app)
    container.published.clear()

    provider.boot(app)

    assert container.published == []


def test_boot_without_container(provider):
    """Test that boot only validates the application."""
    provider.boot(HostApplication(None))


def test_boot_none_app(provider):
    """Test that boot rejects a missing application."""
    with pytest.raises(NullApplicationError):
        provider.boot(None)
