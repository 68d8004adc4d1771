"""Client registry for building and caching api clients per provider."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from api_dispatch.core.auth.http import AUTHENTICATION_TYPE_BASIC, AUTHENTICATION_TYPE_QUERY
from api_dispatch.core.client import ApiClient, BearerApiClient, HttpApiClient
from api_dispatch.core.config.settings import DispatchSettings
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.exceptions import InvalidAuthenticationTypeError, MissingProviderConfigError
from api_dispatch.core.transport import DEFAULT_TIMEOUT, HttpTransport, HttpxTransport

logger = logging.getLogger(__name__)

DEFAULT_AUTHENTICATION_TYPE = "http-basic"

# authentication.type -> (client class, http authentication type)
CLIENT_TYPES: dict[str, tuple[type[BearerApiClient] | type[HttpApiClient], str | None]] = {
    "bearer": (BearerApiClient, None),
    "sanctum": (BearerApiClient, None),
    "http-basic": (HttpApiClient, AUTHENTICATION_TYPE_BASIC),
    "http:basic": (HttpApiClient, AUTHENTICATION_TYPE_BASIC),
    "http-query": (HttpApiClient, AUTHENTICATION_TYPE_QUERY),
    "http:query": (HttpApiClient, AUTHENTICATION_TYPE_QUERY),
}


class ClientRegistry:
    """Builds api clients from configuration and caches them per provider.

    Responsibilities:
    - Choose the client type from ``<provider>.authentication.type``
    - Cache one client per provider name
    - Create ad-hoc bearer/http clients that bypass configuration
    - Share one transport (connection pool) between all its clients

    Construct one registry at startup, pass it to the code that needs
    clients and close() it at shutdown. Access to the cache is guarded by a
    lock; the clients themselves are not synchronized.
    """

    def __init__(
        self,
        config: ConfigSource | Mapping[str, Any] | None = None,
        transport: HttpTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize a registry.

        Args:
            config: Provider configuration tree (a plain mapping is wrapped)
            transport: Transport shared by every client built here. When None,
                the registry creates one on first use and closes it in close()
            timeout: Default timeout of the transport the registry creates
        """
        if config is None:
            config = ConfigSource()
        elif not isinstance(config, ConfigSource):
            config = ConfigSource.from_mapping(config)
        self.config = config
        self.timeout = timeout
        self._transport = transport
        self._owns_transport = transport is None
        self._clients: dict[str, ApiClient] = {}
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, settings: DispatchSettings | None = None) -> ClientRegistry:
        """Build a registry from the TOML file and timeout in the settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist
        """
        settings = settings or DispatchSettings.load()
        return cls(
            config=ConfigSource.from_toml(settings.config_file),
            timeout=settings.request_timeout,
        )

    @property
    def transport(self) -> HttpTransport:
        """The transport shared by all clients of this registry."""
        with self._lock:
            if self._transport is None:
                self._transport = HttpxTransport(timeout=self.timeout)
            return self._transport

    def get_or_create_client(self, provider_name: str) -> ApiClient:
        """Get the cached client for a provider, building it on first access.

        Raises:
            MissingProviderConfigError: If the provider is not configured
            InvalidAuthenticationTypeError: If its authentication type is unknown
        """
        with self._lock:
            if not self.client_exists(provider_name):
                self.register(provider_name, self._build_client(provider_name))
            return self._clients[provider_name]

    def force_create_client(self, provider_name: str) -> ApiClient:
        """Build a new client from configuration, replacing any cached one.

        Raises:
            MissingProviderConfigError: If the provider is not configured
            InvalidAuthenticationTypeError: If its authentication type is unknown
        """
        client = self._build_client(provider_name)
        self.register(provider_name, client)
        return client

    def client_exists(self, provider_name: str) -> bool:
        with self._lock:
            return isinstance(self._clients.get(provider_name), ApiClient)

    def create_bearer_client(
        self,
        provider_name: str | None = None,
        token: str | None = None,
    ) -> BearerApiClient:
        """Create a bearer client without reading the authentication type.

        The client is registered under ``provider_name`` when one is given.
        """
        client = BearerApiClient(self.config, provider_name, self.transport)
        if token:
            client.set_token(token)
        if provider_name:
            self.register(provider_name, client)
        return client

    def create_http_client(
        self,
        provider_name: str | None = None,
        authentication_type: str | None = None,
        credentials: Mapping[str, Any] | None = None,
    ) -> HttpApiClient:
        """Create an http client without reading the authentication type.

        The client is registered under ``provider_name`` when one is given.
        """
        client = HttpApiClient(self.config, provider_name, self.transport)
        if authentication_type:
            client.with_authentication_type(authentication_type)
        if credentials:
            client.with_credentials(credentials)
        if provider_name:
            self.register(provider_name, client)
        return client

    def register(self, provider_name: str, client: ApiClient) -> None:
        with self._lock:
            self._clients[provider_name] = client

    def clear(self) -> None:
        """Drop all cached clients.

        The shared transport stays open; use close() to release it.
        """
        with self._lock:
            self._clients.clear()

    def close(self) -> None:
        """Drop all cached clients and close the transport the registry created.

        A transport passed in by the caller is left open. The registry stays
        usable: a new transport is created on next use.
        """
        with self._lock:
            self._clients.clear()
            if self._owns_transport and self._transport is not None:
                self._transport.close()
                self._transport = None
                logger.debug("Closed api client transport")

    def __enter__(self) -> ClientRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _build_client(self, provider_name: str) -> ApiClient:
        if self.config.provider(provider_name) is None:
            raise MissingProviderConfigError(provider_name)

        authentication_type = self.config.provider_value(
            provider_name, "authentication.type", DEFAULT_AUTHENTICATION_TYPE
        )
        client_type = (
            CLIENT_TYPES.get(authentication_type) if isinstance(authentication_type, str) else None
        )
        if client_type is None:
            raise InvalidAuthenticationTypeError(authentication_type, provider=provider_name)

        client_class, http_authentication_type = client_type
        client = client_class(self.config, provider_name, self.transport)
        if isinstance(client, HttpApiClient) and http_authentication_type:
            client.with_authentication_type(http_authentication_type)

        logger.debug(
            "Created %s for api provider %s (authentication: %s)",
            client_class.__name__,
            provider_name,
            authentication_type,
        )
        return client
