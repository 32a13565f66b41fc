"""Exceptions raised by the MongoDB provider."""


class MongoDBProviderError(Exception):
    """Base class for all provider errors.

    These are startup-time integration errors. They are never retried and
    are meant to stop the application boot.
    """

    pass


class NullApplicationError(MongoDBProviderError):
    """Raised when Register or Boot receives no application."""

    @classmethod
    def for_phase(cls, phase: str) -> "NullApplicationError":
        return cls(f"Application cannot be None in {phase}")


class NullContainerError(MongoDBProviderError):
    """Raised when the application does not expose a container."""

    @classmethod
    def for_phase(cls, phase: str) -> "NullContainerError":
        return cls(f"Application container cannot be None in {phase}")


class ConfigCapabilityMissingError(MongoDBProviderError):
    """Raised when the container cannot supply a configuration service."""

    @classmethod
    def from_name(cls, name: str, reason: str | None = None) -> "ConfigCapabilityMissingError":
        message = f"MongoDB provider requires the '{name}' service to be registered"
        if reason:
            message = f"{message}: {reason}"
        return cls(message)


class ConfigDecodeError(MongoDBProviderError):
    """Raised when the configuration section cannot be decoded.

    The original error is kept as ``__cause__`` and quoted in the message.
    """

    @classmethod
    def from_error(cls, key: str, error: Exception) -> "ConfigDecodeError":
        return cls(f"MongoDB config unmarshal error for '{key}': {error}")


class HealthCheckError(MongoDBProviderError):
    """Raised when the server does not answer a health check."""

    pass
