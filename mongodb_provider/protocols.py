"""Protocols describing what the provider needs from its host.

The host application, its container and its configuration service are
external collaborators. The provider only depends on the small structural
interfaces below, so any host whose objects have these methods can drive it.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConfigDecoder(Protocol):
    """A configuration service able to decode a named section."""

    def unmarshal_key(self, key: str, target: Any) -> None:
        """Overlay the section stored under ``key`` onto ``target`` in place.

        Fields absent from the section must be left untouched.

        Raises:
            Exception: Any error when the section cannot be decoded.
        """
        ...


@runtime_checkable
class ConfigManager(ConfigDecoder, Protocol):
    """A configuration service that can also be queried directly."""

    def has(self, key: str) -> bool:
        """Return True if a value is stored under ``key``."""
        ...

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key`` or ``default``."""
        ...


class Container(Protocol):
    """Name-keyed registry of service instances owned by the host."""

    def bound(self, name: str) -> bool:
        """Return True if a service is registered under ``name``."""
        ...

    def make(self, name: str) -> Any:
        """Resolve the service registered under ``name``.

        Raises:
            Exception: If the service cannot be resolved.
        """
        ...

    def instance(self, name: str, value: Any) -> None:
        """Register an already constructed singleton under ``name``."""
        ...


class Application(Protocol):
    """Host application handed to providers during Register and Boot."""

    @property
    def container(self) -> Container | None: ...


@runtime_checkable
class ServiceProvider(Protocol):
    """Two-phase provider contract driven by the host.

    The host calls ``register`` on every provider, in an order derived from
    ``requires``/``providers``, before it calls ``boot`` on any of them.
    """

    def register(self, app: Application | None) -> None: ...

    def boot(self, app: Application | None) -> None: ...

    def providers(self) -> list[str]: ...

    def requires(self) -> list[str]: ...
