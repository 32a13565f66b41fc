"""MongoDB facade published by the service provider.

This module provides the ``MongoDBManager`` which owns a private copy of the
resolved configuration and creates the async PyMongo client on first use.
Constructing a manager never touches the network.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, TypeVar

try:
    from pymongo import AsyncMongoClient
    from pymongo.server_api import ServerApi
except ImportError as err:
    raise ImportError(
        "pymongo package is required for the MongoDB provider. "
        "Install it with: pip install mongodb-provider"
    ) from err

from .config import MongoDBConfig
from .exceptions import HealthCheckError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

SRV_SCHEME = "mongodb+srv://"


def build_client_options(config: MongoDBConfig) -> dict[str, Any]:
    """Translate a configuration into ``AsyncMongoClient`` keyword options.

    Options the driver rejects in a given context are left out: credentials
    without a username, TLS files when TLS is disabled, SRV options for plain
    URIs and read preference tags or staleness for the primary mode.

    Args:
        config: The resolved configuration.

    Returns:
        Keyword arguments for the driver client, excluding the URI.
    """
    kwargs: dict[str, Any] = {
        "appname": config.app_name or None,
        "directConnection": config.direct,
        "loadBalanced": config.load_balanced,
        "maxPoolSize": config.max_pool_size,
        "minPoolSize": config.min_pool_size,
        "maxConnecting": config.max_connecting,
        "maxIdleTimeMS": config.max_conn_idle_time,
        "connectTimeoutMS": config.connect_timeout,
        "serverSelectionTimeoutMS": config.server_selection_timeout,
        "heartbeatFrequencyMS": config.heartbeat_interval,
        "localThresholdMS": config.local_threshold,
        "timeoutMS": config.timeout,
        "retryWrites": config.retry_writes,
        "retryReads": config.retry_reads,
        "zlibCompressionLevel": config.zlib_level,
        "serverMonitoringMode": config.server_monitoring_mode,
        "readConcernLevel": config.read_concern.level,
        "w": config.write_concern.w,
        "journal": config.write_concern.journal,
        "wTimeoutMS": config.write_concern.w_timeout,
        "readPreference": config.read_preference.mode,
        "server_api": ServerApi(
            config.server_api.version,
            strict=config.server_api.strict,
            deprecation_errors=config.server_api.deprecation_errors,
        ),
        # Connect on first operation rather than at construction.
        "connect": False,
    }

    if config.replica_set:
        kwargs["replicaSet"] = config.replica_set

    # Zero keeps the driver default of no socket timeout.
    if config.socket_timeout:
        kwargs["socketTimeoutMS"] = config.socket_timeout

    if config.compressors:
        kwargs["compressors"] = ",".join(config.compressors)

    if config.read_preference.mode != "primary":
        if config.read_preference.tag_sets:
            kwargs["readPreferenceTags"] = [
                ",".join(f"{k}:{v}" for k, v in tag_set.items())
                for tag_set in config.read_preference.tag_sets
            ]
        if config.read_preference.max_staleness:
            kwargs["maxStalenessSeconds"] = config.read_preference.max_staleness

    if config.auth.username:
        kwargs["username"] = config.auth.username
        kwargs["password"] = config.auth.password
        if config.auth.auth_source:
            kwargs["authSource"] = config.auth.auth_source
        if config.auth.auth_mechanism:
            kwargs["authMechanism"] = config.auth.auth_mechanism
        if config.auth.auth_mechanism_properties:
            kwargs["authMechanismProperties"] = ",".join(
                f"{k}:{v}" for k, v in config.auth.auth_mechanism_properties.items()
            )

    if config.tls.enabled:
        kwargs["tls"] = True
        if config.tls.insecure_skip_verify:
            kwargs["tlsInsecure"] = True
        if config.tls.ca_file:
            kwargs["tlsCAFile"] = config.tls.ca_file
        if config.tls.cert_file:
            kwargs["tlsCertificateKeyFile"] = config.tls.cert_file
        # The driver reads the private key from the certificate file only.
        if config.tls.key_file and config.tls.key_file != config.tls.cert_file:
            LOGGER.warning(
                "tls.key_file is ignored, combine the certificate and key into tls.cert_file",
                extra={"key_file": config.tls.key_file},
            )
        # tlsInsecure already disables the OCSP endpoint check and the driver
        # rejects both together.
        if config.disable_ocsp_endpoint_check and not config.tls.insecure_skip_verify:
            kwargs["tlsDisableOCSPEndpointCheck"] = True

    if config.uri.startswith(SRV_SCHEME):
        kwargs["srvServiceName"] = config.srv.service_name
        if config.srv.max_hosts:
            kwargs["srvMaxHosts"] = config.srv.max_hosts

    if config.auto_encryption.enabled:
        kwargs["auto_encryption_opts"] = _auto_encryption_options(config)

    return kwargs


def _auto_encryption_options(config: MongoDBConfig) -> Any:
    # Requires pymongo[encryption]; only imported when encryption is enabled.
    from pymongo.encryption_options import AutoEncryptionOpts

    settings = config.auto_encryption
    return AutoEncryptionOpts(
        kms_providers=dict(settings.kms_providers),
        key_vault_namespace=settings.key_vault_namespace,
        schema_map=dict(settings.schema_map) or None,
        bypass_auto_encryption=settings.bypass_auto_encryption,
        **settings.extra_options,
    )


class MongoDBManager:
    """Facade over the async PyMongo client.

    The manager keeps a deep copy of the configuration it was created with,
    so later changes to the caller's configuration object have no effect on
    it. The driver client is created lazily and cached.

    Attributes:
        config: The manager's own copy of the configuration.

    Examples:
        >>> manager = MongoDBManager(default_config())
        >>> users = manager.collection("users")
        >>> await users.insert_one({"name": "Alice"})
        >>> await manager.close()

        >>> async with MongoDBManager(config) as manager:
        ...     await manager.ping()
    """

    def __init__(self, config: MongoDBConfig):
        self.config = config.model_copy(deep=True)
        self._client: AsyncMongoClient | None = None

    @property
    def client(self) -> AsyncMongoClient:
        """Get or create the async driver client.

        No connection is opened until the first operation.
        """
        if self._client is None:
            options = build_client_options(self.config)
            self._client = AsyncMongoClient(self.config.uri, **options)
            LOGGER.debug("Created MongoDB client", extra={"appname": self.config.app_name})
        return self._client

    @property
    def database(self):
        """Get the configured default database."""
        return self.client[self.config.database]

    def get_database(self, name: str):
        return self.client[name]

    def collection(self, name: str, database: str | None = None):
        """Get a collection from the default or a named database.

        Args:
            name: Collection name.
            database: Database name. Defaults to the configured database.
        """
        db = self.database if database is None else self.get_database(database)
        return db[name]

    async def ping(self) -> None:
        await self.client.admin.command("ping")

    async def verify_connectivity(self) -> bool:
        """Verify that the server answers a ping.

        Returns:
            True if the ping succeeds, False otherwise.
        """
        try:
            await self.ping()
            return True
        except Exception:
            return False

    async def health_check(self) -> None:
        """Ping the server and fail loudly if it does not answer.

        Raises:
            HealthCheckError: If the ping fails.
        """
        try:
            await self.ping()
        except Exception as err:
            LOGGER.error("MongoDB health check failed", extra={"database": self.config.database})
            raise HealthCheckError(f"MongoDB health check failed: {err}") from err

    async def stats(self) -> dict[str, Any]:
        return await self.database.command("dbStats")

    async def list_collection_names(self) -> list[str]:
        return await self.database.list_collection_names()

    async def list_database_names(self) -> list[str]:
        return await self.client.list_database_names()

    async def watch(self, pipeline: Sequence[Mapping[str, Any]] | None = None, **kwargs: Any):
        """Open a change stream on the default database.

        Requires a replica set or sharded cluster.
        """
        return await self.database.watch(pipeline, **kwargs)

    async def create_index(self, collection_name: str, keys: Any, **kwargs: Any) -> str:
        return await self.collection(collection_name).create_index(keys, **kwargs)

    def start_session(self, **kwargs: Any):
        return self.client.start_session(**kwargs)

    async def with_transaction(
        self, callback: Callable[[Any], Awaitable[T]], **kwargs: Any
    ) -> T:
        """Run ``callback`` inside a transaction on a fresh session.

        The driver retries the callback and the commit on transient errors.

        Args:
            callback: Coroutine function receiving the session.
            **kwargs: Transaction options (read_concern, write_concern, ...).
        """
        async with self.client.start_session() as session:
            return await session.with_transaction(callback, **kwargs)

    async def close(self) -> None:
        """Close the client and all pooled connections, if it was created."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    # HasLifecycle protocol implementation

    async def on_startup(self) -> None:
        """No-op, connections are established lazily."""
        pass

    async def on_shutdown(self) -> None:
        await self.close()

    async def __aenter__(self) -> "MongoDBManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
