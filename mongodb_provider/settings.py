"""Configuration service backed by pydantic-settings.

Hosts that do not already register a ``config`` service can use
``SettingsConfigManager``. Sections are read from keyword arguments and from
environment variables with the ``APP_`` prefix. Nested keys use ``__`` as a
delimiter, for example:

- APP_MONGODB__URI=mongodb://db:27017
- APP_MONGODB__AUTH__USERNAME=reporting
- APP_MONGODB='{"database": "orders", "max_pool_size": 20}'

Keyword arguments take precedence over the environment.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_MISSING = object()


class SettingsConfigManager(BaseSettings):
    """Configuration service exposing named sections.

    Implements the ``ConfigManager`` protocol expected by the MongoDB
    provider under the ``config`` service name.

    Examples:
        >>> config = SettingsConfigManager(mongodb={"database": "orders"})
        >>> config.get("mongodb.database")
        'orders'
        >>> container.instance("config", config)
    """

    mongodb: dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        extra="allow",
    )

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key.

        Args:
            key: Dotted path, e.g. "mongodb.auth.username".
            default: Value returned when nothing is stored under ``key``.
        """
        value = self._lookup(key)
        return default if value is _MISSING else value

    def unmarshal_key(self, key: str, target: BaseModel) -> None:
        """Overlay the section stored under ``key`` onto ``target``.

        Args:
            key: Dotted path of the section.
            target: Model updated in place. Fields not present in the section
                keep their current values.

        Raises:
            TypeError: If the stored section is not a mapping.
            ValueError: If the section contains unknown keys or invalid
                values.
        """
        section = self._lookup(key)
        if section is _MISSING or section is None:
            return
        if not isinstance(section, Mapping):
            raise TypeError(f"Configuration section '{key}' is not a mapping")
        overlay(target, section, key)

    def _lookup(self, key: str) -> Any:
        node: Any = self.model_dump()
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return _MISSING
            node = node[part]
        return node


def overlay(target: BaseModel, data: Mapping[str, Any], path: str = "") -> None:
    """Recursively assign ``data`` onto the fields of ``target``.

    Nested models are updated field by field. Every other value replaces the
    current one and is validated on assignment.

    Raises:
        ValueError: If a key does not name a field of the model, or a value
            fails validation.
    """
    fields = type(target).model_fields
    for name, value in data.items():
        location = f"{path}.{name}" if path else name
        if name not in fields:
            raise ValueError(f"Unknown configuration key '{location}'")

        current = getattr(target, name)
        if isinstance(current, BaseModel) and isinstance(value, Mapping):
            overlay(current, value, location)
        else:
            setattr(target, name, value)
