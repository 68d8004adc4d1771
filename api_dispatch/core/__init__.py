"""Core of api_dispatch.

- ClientRegistry: builds and caches one ApiClient per provider
- ApiClient / BearerApiClient / HttpApiClient: per-provider facades
- resolve_endpoint: endpoint configuration -> (url, method)
- BearerStrategy / HttpStrategy: request authentication
- HttpTransport / HttpxTransport: sending prepared requests
"""

from api_dispatch.core.auth import BearerStrategy, HttpStrategy, SendableRequest
from api_dispatch.core.client import ApiClient, BearerApiClient, HttpApiClient
from api_dispatch.core.config import ConfigSource, DispatchSettings
from api_dispatch.core.endpoints import HttpMethod, ResolvedEndpoint, compose_url, resolve_endpoint
from api_dispatch.core.exceptions import (
    ApiDispatchError,
    AuthenticationError,
    BadAuthenticationTypeError,
    BadEndpointConfigError,
    BadHttpMethodError,
    BadRequestUrlError,
    ConfigurationError,
    InvalidAuthenticationTypeError,
    MissingCredentialsError,
    MissingEndpointConfigError,
    MissingProviderConfigError,
    RequestError,
)
from api_dispatch.core.registry import CLIENT_TYPES, ClientRegistry
from api_dispatch.core.transport import HttpTransport, HttpxTransport

__all__ = [
    "ClientRegistry",
    "CLIENT_TYPES",
    "ApiClient",
    "BearerApiClient",
    "HttpApiClient",
    "ConfigSource",
    "DispatchSettings",
    "HttpMethod",
    "ResolvedEndpoint",
    "compose_url",
    "resolve_endpoint",
    "BearerStrategy",
    "HttpStrategy",
    "SendableRequest",
    "HttpTransport",
    "HttpxTransport",
    "ApiDispatchError",
    "ConfigurationError",
    "MissingProviderConfigError",
    "InvalidAuthenticationTypeError",
    "MissingEndpointConfigError",
    "BadEndpointConfigError",
    "AuthenticationError",
    "MissingCredentialsError",
    "BadAuthenticationTypeError",
    "RequestError",
    "BadHttpMethodError",
    "BadRequestUrlError",
]
