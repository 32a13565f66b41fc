"""Service provider registering MongoDB services with a host container.

The provider follows a two-phase contract. During ``register`` it resolves
the ``mongodb`` configuration section through the host's ``config`` service,
builds a ``MongoDBManager`` and publishes three singletons:

- ``mongodb``: the manager itself
- ``mongodb.client``: the async driver client
- ``mongodb.database``: the configured default database

``boot`` is a no-op extension point. The host must call ``register`` on
every provider before calling ``boot`` on any of them, and uses
``requires`` to order registration across providers.
"""

import logging
from typing import Any

from .exceptions import (
    ConfigCapabilityMissingError,
    NullApplicationError,
    NullContainerError,
)
from .manager import MongoDBManager
from .protocols import Application, ConfigDecoder, Container
from .resolver import CONFIG_KEY, resolve_config

LOGGER = logging.getLogger(__name__)

CONFIG_SERVICE = "config"


class MongoDBServiceProvider:
    """Registers the MongoDB manager, client and database with a container.

    Attributes:
        name: Primary service name. The client and database are published
            under ``<name>.client`` and ``<name>.database``.
        config_key: Configuration section holding the provider settings.

    Examples:
        >>> container.instance("config", SettingsConfigManager())
        >>> provider = MongoDBServiceProvider()
        >>> provider.register(app)
        >>> provider.boot(app)
        >>> manager = container.make("mongodb")
        >>> provider.providers()
        ['mongodb', 'mongodb.client', 'mongodb.database']

    Note:
        ``register`` is not idempotent. Calling it twice resolves the
        configuration again, republishes the services and records the names
        a second time.
    """

    name = "mongodb"
    config_key = CONFIG_KEY

    def __init__(self) -> None:
        self._providers: list[str] = []

    def register(self, app: Application | None) -> None:
        """Register the MongoDB services with the application's container.

        Args:
            app: The host application. Must expose a container that has a
                ``config`` service registered.

        Raises:
            NullApplicationError: If ``app`` is None.
            NullContainerError: If the application has no container.
            ConfigCapabilityMissingError: If the container cannot supply a
                configuration service able to decode sections.
            ConfigDecodeError: If the configuration section cannot be
                decoded.
        """
        if app is None:
            raise NullApplicationError.for_phase("register")

        container = app.container
        if container is None:
            raise NullContainerError.for_phase("register")

        config_service = self._config_service(container)
        config = resolve_config(config_service, self.config_key)

        manager = MongoDBManager(config)
        services: list[tuple[str, Any]] = [
            (self.name, manager),
            (f"{self.name}.client", manager.client),
            (f"{self.name}.database", manager.database),
        ]
        for service_name, service in services:
            container.instance(service_name, service)
            LOGGER.debug("Published service", extra={"service": service_name})

        self._providers.extend(service_name for service_name, _ in services)
        LOGGER.info(
            "Registered MongoDB services",
            extra={"services": [service_name for service_name, _ in services]},
        )

    def boot(self, app: Application | None) -> None:
        """Boot the provider.

        Everything is set up during ``register``, so there is nothing left
        to do besides validating the application.

        Raises:
            NullApplicationError: If ``app`` is None.
        """
        if app is None:
            raise NullApplicationError.for_phase("boot")

    def providers(self) -> list[str]:
        """Get the names of the services published so far, in order."""
        return list(self._providers)

    def requires(self) -> list[str]:
        """Get the names of the services this provider depends on."""
        return [CONFIG_SERVICE]

    def _config_service(self, container: Container) -> ConfigDecoder:
        if not container.bound(CONFIG_SERVICE):
            LOGGER.error("Config service is not registered")
            raise ConfigCapabilityMissingError.from_name(CONFIG_SERVICE, "not bound")

        try:
            service = container.make(CONFIG_SERVICE)
        except Exception as err:
            LOGGER.error("Config service could not be resolved")
            raise ConfigCapabilityMissingError.from_name(CONFIG_SERVICE, str(err)) from err

        if not isinstance(service, ConfigDecoder):
            LOGGER.error("Config service cannot decode configuration sections")
            raise ConfigCapabilityMissingError.from_name(
                CONFIG_SERVICE,
                f"{type(service).__name__} cannot decode configuration sections",
            )
        return service
