"""Per-provider api clients.

An ApiClient owns exactly one authentication strategy and composes it with
endpoint resolution:

    client.call_endpoint("listInvoices", {"page": 2})
        -> resolve_endpoint(provider config, "listInvoices")
        -> strategy.prepare(method, url, data)
        -> transport.send(request)

Builder methods mutate the client and return it, so calls can be chained::

    registry.get_or_create_client("billing").with_token(token).call_endpoint("listInvoices")

Clients are not synchronized. Callers sharing one client between threads
must not mutate it (with_token, with_credentials, ...) concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from api_dispatch.core.auth import AuthenticationStrategy, BearerStrategy, HttpStrategy
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.endpoints import HttpMethod, ResolvedEndpoint, resolve_endpoint
from api_dispatch.core.transport import HttpTransport, HttpxTransport

logger = logging.getLogger(__name__)


class ApiClient:
    """Base client: endpoint calls and raw verb methods over one strategy."""

    def __init__(
        self,
        strategy: AuthenticationStrategy,
        config: ConfigSource | None = None,
        provider_name: str | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self.config = config or ConfigSource()
        self.provider_name = provider_name
        self.strategy = strategy
        self._transport = transport
        self._owns_transport = transport is None
        self._timeout: float | None = None

    @property
    def transport(self) -> HttpTransport:
        # Built on first send so that clients which never call out hold no pool
        if self._transport is None:
            self._transport = HttpxTransport()
        return self._transport

    def close(self) -> None:
        """Close the transport this client created for itself.

        A transport passed in (e.g. a registry's shared one) is left open.
        """
        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def with_timeout(self, seconds: float) -> ApiClient:
        """Set the timeout passed to the transport for every call."""
        self._timeout = seconds
        return self

    def with_data(self, data: Mapping[str, Any]) -> ApiClient:
        """Merge ``data`` into the payload of every subsequent call."""
        self.strategy.with_data(data)
        return self

    def get_endpoint_config(self, endpoint_name: str) -> ResolvedEndpoint:
        return resolve_endpoint(
            self.config.provider(self.provider_name), endpoint_name, self.provider_name
        )

    def call_endpoint(
        self, endpoint_name: str, data: Mapping[str, Any] | None = None
    ) -> httpx.Response:
        """Call a configured endpoint of this client's provider.

        Raises:
            MissingEndpointConfigError: If the endpoint is not configured
            BadEndpointConfigError: If the endpoint entry is malformed
            AuthenticationError: If the request cannot be authenticated
        """
        endpoint = self.get_endpoint_config(endpoint_name)
        return self.send(endpoint.method, endpoint.url, data)

    def send(
        self,
        method: HttpMethod | str,
        url: str,
        data: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        """Authenticate and send one request; the response is returned as-is.

        Raises:
            BadHttpMethodError: If method is not get/post/put/patch/delete/head
            BadRequestUrlError: If url is empty
            AuthenticationError: If the request cannot be authenticated
        """
        request = self.strategy.prepare(method, url, data)
        logger.debug(
            "Sending %s %s for api provider %s",
            request.method.value.upper(),
            request.url,
            self.provider_name,
        )
        return self.transport.send(request, timeout=self._timeout)

    def get(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.GET, url, data)

    def post(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.POST, url, data)

    def put(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.PUT, url, data)

    def patch(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.PATCH, url, data)

    def delete(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.DELETE, url, data)

    def head(self, url: str, data: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.send(HttpMethod.HEAD, url, data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider_name={self.provider_name!r})"


class BearerApiClient(ApiClient):
    """Client authenticating with a bearer token."""

    strategy: BearerStrategy

    def __init__(
        self,
        config: ConfigSource | None = None,
        provider_name: str | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        config = config or ConfigSource()
        super().__init__(BearerStrategy(config, provider_name), config, provider_name, transport)

    @property
    def token(self) -> str | None:
        """The explicitly set token (configuration is not consulted)."""
        return self.strategy.token

    def set_token(self, token: str) -> BearerApiClient:
        self.strategy.set_token(token)
        return self

    def with_token(self, token: str) -> BearerApiClient:
        return self.set_token(token)

    def get_token(self) -> str:
        return self.strategy.get_token()


class HttpApiClient(ApiClient):
    """Client authenticating with basic auth or query/body credentials."""

    strategy: HttpStrategy

    def __init__(
        self,
        config: ConfigSource | None = None,
        provider_name: str | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        config = config or ConfigSource()
        super().__init__(HttpStrategy(config, provider_name), config, provider_name, transport)

    def with_authentication_type(self, authentication_type: str) -> HttpApiClient:
        """Set ``basic`` or ``query`` (the ``http:`` prefix is accepted)."""
        self.strategy.set_authentication_type(authentication_type)
        return self

    def get_authentication_type(self) -> str:
        return self.strategy.get_authentication_type()

    def with_credentials(self, credentials: Mapping[str, Any]) -> HttpApiClient:
        self.strategy.set_credentials(credentials)
        return self

    def get_credentials(self) -> dict[str, Any]:
        return self.strategy.get_credentials()
