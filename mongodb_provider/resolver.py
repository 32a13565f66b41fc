"""Resolution of the ``mongodb`` configuration section."""

import logging

from .config import MongoDBConfig, default_config
from .exceptions import ConfigDecodeError
from .protocols import ConfigDecoder

LOGGER = logging.getLogger(__name__)

CONFIG_KEY = "mongodb"


def resolve_config(config_service: ConfigDecoder, key: str = CONFIG_KEY) -> MongoDBConfig:
    """Resolve the provider configuration from the host's config service.

    Starts from a fresh ``default_config()`` and lets the config service
    overlay the section stored under ``key`` onto it. Fields the section
    does not specify keep their defaults.

    Args:
        config_service: The host service able to decode configuration
            sections.
        key: Name of the configuration section.

    Returns:
        The fully populated configuration.

    Raises:
        ConfigDecodeError: If the config service fails to decode the section.
            The original error is chained as the cause.
    """
    config = default_config()
    try:
        config_service.unmarshal_key(key, config)
    except Exception as err:
        LOGGER.error("Failed to decode configuration section", extra={"config_key": key})
        raise ConfigDecodeError.from_error(key, err) from err

    LOGGER.debug("Resolved configuration section", extra={"config_key": key})
    return config
