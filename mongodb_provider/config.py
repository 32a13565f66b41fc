"""Configuration models for the MongoDB provider.

This module provides the Pydantic models describing the ``mongodb``
configuration section, the canonical defaults for every field, and
accessors converting the millisecond fields into ``timedelta`` values.
"""

from datetime import timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    # Sections are overlaid in place by the config service, so they stay
    # mutable and validate every assignment.
    model_config = ConfigDict(validate_assignment=True, extra="forbid")


class TLSConfig(_Section):
    """TLS settings for the client connection.

    Attributes:
        enabled: Use TLS for all connections.
        insecure_skip_verify: Accept invalid server certificates and hostnames.
        cert_file: Path to the client certificate (PEM).
        key_file: Path to the client private key (PEM).
        ca_file: Path to the certificate authority bundle.
    """

    enabled: bool = False
    insecure_skip_verify: bool = False
    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""


class AuthConfig(_Section):
    """Credentials and authentication mechanism."""

    username: str = ""
    password: str = ""
    auth_source: str = "admin"
    auth_mechanism: str = "SCRAM-SHA-256"
    auth_mechanism_properties: dict[str, str] = Field(default_factory=dict)


class ReadPreferenceConfig(_Section):
    """Read preference.

    Attributes:
        mode: One of primary, primaryPreferred, secondary,
            secondaryPreferred or nearest.
        tag_sets: Ordered tag sets used to select eligible members.
        max_staleness: Maximum replication lag in seconds.
        hedge_enabled: Request hedged reads on sharded clusters.
    """

    mode: str = "primary"
    tag_sets: list[dict[str, str]] = Field(default_factory=list)
    max_staleness: int = Field(default=90, ge=0)
    hedge_enabled: bool = False


class ReadConcernConfig(_Section):
    level: str = "majority"


class WriteConcernConfig(_Section):
    """Write concern.

    Attributes:
        w: Acknowledgment requirement, "majority", a tag set name or a
            number of members.
        journal: Require acknowledgment from the on-disk journal.
        w_timeout: Time limit for the write concern in milliseconds.
    """

    w: str | int = "majority"
    journal: bool = True
    w_timeout: int = Field(default=30000, ge=0)


class SRVConfig(_Section):
    max_hosts: int = Field(default=0, ge=0)
    service_name: str = "mongodb"


class ServerAPIConfig(_Section):
    version: str = "1"
    strict: bool = False
    deprecation_errors: bool = False


class BSONConfig(_Section):
    """Document encoding flags."""

    use_json_struct_tags: bool = False
    error_on_inline_map: bool = False
    allow_truncating_floats: bool = False


class AutoEncryptionConfig(_Section):
    """Automatic client-side field level encryption."""

    enabled: bool = False
    kms_providers: dict[str, Any] = Field(default_factory=dict)
    schema_map: dict[str, Any] = Field(default_factory=dict)
    bypass_auto_encryption: bool = False
    extra_options: dict[str, Any] = Field(default_factory=dict)
    key_vault_namespace: str = "encryption.__keyVault"


class MongoDBConfig(_Section):
    """Configuration for the MongoDB provider.

    Every millisecond-valued field is stored as a plain integer; use the
    ``get_*`` accessors to obtain ``timedelta`` values. A ``socket_timeout``
    of zero means "no timeout". Zero means a zero duration for every other
    field.

    Mapping and list fields are built with ``default_factory`` so that no two
    configurations ever share the same container.

    Examples:
        >>> config = MongoDBConfig(uri="mongodb://db:27017", database="orders")
        >>> config.get_connect_timeout()
        datetime.timedelta(seconds=30)
        >>> config.auth.auth_mechanism
        'SCRAM-SHA-256'
    """

    # Connection identity
    uri: str = "mongodb://localhost:27017"
    database: str = "myapp"
    app_name: str = "python-app"
    replica_set: str = ""
    direct: bool = False
    load_balanced: bool = False

    # Pool shape
    max_pool_size: int = Field(default=100, ge=0)
    min_pool_size: int = Field(default=5, ge=0)
    max_connecting: int = Field(default=10, ge=0)

    # Timeouts (milliseconds)
    max_conn_idle_time: int = Field(default=600000, ge=0)
    connect_timeout: int = Field(default=30000, ge=0)
    server_selection_timeout: int = Field(default=30000, ge=0)
    socket_timeout: int = Field(default=0, ge=0)
    heartbeat_interval: int = Field(default=10000, ge=0)
    local_threshold: int = Field(default=15000, ge=0)
    timeout: int = Field(default=30000, ge=0)

    tls: TLSConfig = Field(default_factory=TLSConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    read_preference: ReadPreferenceConfig = Field(default_factory=ReadPreferenceConfig)
    read_concern: ReadConcernConfig = Field(default_factory=ReadConcernConfig)
    write_concern: WriteConcernConfig = Field(default_factory=WriteConcernConfig)

    retry_writes: bool = True
    retry_reads: bool = True

    compressors: list[str] = Field(default_factory=list)
    zlib_level: int = 6
    zstd_level: int = 6

    srv: SRVConfig = Field(default_factory=SRVConfig)
    server_api: ServerAPIConfig = Field(default_factory=ServerAPIConfig)
    server_monitoring_mode: Literal["auto", "stream", "poll"] = "auto"
    disable_ocsp_endpoint_check: bool = False

    bson: BSONConfig = Field(default_factory=BSONConfig)
    auto_encryption: AutoEncryptionConfig = Field(default_factory=AutoEncryptionConfig)

    def get_max_conn_idle_time(self) -> timedelta:
        return timedelta(milliseconds=self.max_conn_idle_time)

    def get_connect_timeout(self) -> timedelta:
        return timedelta(milliseconds=self.connect_timeout)

    def get_server_selection_timeout(self) -> timedelta:
        return timedelta(milliseconds=self.server_selection_timeout)

    def get_socket_timeout(self) -> timedelta:
        """Get the socket timeout.

        Returns:
            The timeout as a duration. A stored value of zero yields a zero
            duration, which the driver treats as "no timeout".
        """
        if self.socket_timeout == 0:
            return timedelta(0)
        return timedelta(milliseconds=self.socket_timeout)

    def get_heartbeat_interval(self) -> timedelta:
        return timedelta(milliseconds=self.heartbeat_interval)

    def get_local_threshold(self) -> timedelta:
        return timedelta(milliseconds=self.local_threshold)

    def get_timeout(self) -> timedelta:
        return timedelta(milliseconds=self.timeout)

    def get_w_timeout(self) -> timedelta:
        """Get the write concern time limit."""
        return timedelta(milliseconds=self.write_concern.w_timeout)


def default_config() -> MongoDBConfig:
    """Create the canonical default configuration.

    A new instance is built on every call, including every nested section,
    mapping and list, so callers are free to mutate the result.

    Returns:
        A fully populated configuration holding only default values.
    """
    return MongoDBConfig()
