"""MongoDB service provider for dependency-injection hosts.

This package resolves a ``mongodb`` configuration section over a complete
set of defaults and publishes a MongoDB manager, client and database into
the host's service container.

Usage:
    >>> from mongodb_provider import MongoDBServiceProvider, SettingsConfigManager
    >>>
    >>> container.instance("config", SettingsConfigManager())
    >>> provider = MongoDBServiceProvider()
    >>> provider.register(app)
    >>> provider.boot(app)
    >>>
    >>> manager = container.make("mongodb")
    >>> await manager.collection("users").find_one({"name": "Alice"})
"""

from .config import (
    AuthConfig,
    AutoEncryptionConfig,
    BSONConfig,
    MongoDBConfig,
    ReadConcernConfig,
    ReadPreferenceConfig,
    ServerAPIConfig,
    SRVConfig,
    TLSConfig,
    WriteConcernConfig,
    default_config,
)
from .exceptions import (
    ConfigCapabilityMissingError,
    ConfigDecodeError,
    HealthCheckError,
    MongoDBProviderError,
    NullApplicationError,
    NullContainerError,
)
from .manager import MongoDBManager, build_client_options
from .protocols import Application, ConfigDecoder, ConfigManager, Container, ServiceProvider
from .provider import MongoDBServiceProvider
from .resolver import CONFIG_KEY, resolve_config
from .settings import SettingsConfigManager

__all__ = [
    # Configuration
    "AuthConfig",
    "AutoEncryptionConfig",
    "BSONConfig",
    "CONFIG_KEY",
    "MongoDBConfig",
    "ReadConcernConfig",
    "ReadPreferenceConfig",
    "ServerAPIConfig",
    "SRVConfig",
    "TLSConfig",
    "WriteConcernConfig",
    "default_config",
    "resolve_config",
    "SettingsConfigManager",
    # Errors
    "ConfigCapabilityMissingError",
    "ConfigDecodeError",
    "HealthCheckError",
    "MongoDBProviderError",
    "NullApplicationError",
    "NullContainerError",
    # Manager
    "MongoDBManager",
    "build_client_options",
    # Provider
    "Application",
    "ConfigDecoder",
    "ConfigManager",
    "Container",
    "MongoDBServiceProvider",
    "ServiceProvider",
]
