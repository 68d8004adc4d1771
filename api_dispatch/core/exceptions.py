"""
Exception hierarchy for api_dispatch.

All exceptions inherit from ApiDispatchError, allowing callers to
catch every library-specific error with a single except clause.

Example:
    >>> try:
    ...     registry.get_or_create_client("billing").call_endpoint("invoices")
    ... except ApiDispatchError as e:
    ...     print(f"Call failed: {e}")
"""

from __future__ import annotations


class ApiDispatchError(Exception):
    """Base exception for all api_dispatch errors.

    Attributes:
        provider: Name of the provider involved, if any
    """

    def __init__(self, message: str, provider: str | None = None) -> None:
        self.provider = provider
        self.message = message
        super().__init__(message)


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigurationError(ApiDispatchError):
    """Raised when the provider configuration tree is missing or malformed."""

    pass


class MissingProviderConfigError(ConfigurationError):
    """Raised when a provider name has no configuration entry.

    Surfaced when a client is built from configuration.
    """

    def __init__(self, provider: str) -> None:
        super().__init__(f"Missing config for api provider {provider!r}", provider=provider)


class InvalidAuthenticationTypeError(ConfigurationError):
    """Raised when a configured authentication type has no client type.

    Example:
        >>> registry.get_or_create_client("legacy")
        InvalidAuthenticationTypeError: No client type found for authentication
        method 'digest' in api provider 'legacy'
    """

    def __init__(self, authentication_type: object, provider: str | None = None) -> None:
        self.authentication_type = authentication_type
        super().__init__(
            f"No client type found for authentication method {authentication_type!r} "
            f"in api provider {provider!r}",
            provider=provider,
        )


class EndpointConfigError(ConfigurationError):
    """Base class for errors in a single endpoint entry.

    Attributes:
        endpoint: Name of the endpoint that failed to resolve
    """

    def __init__(self, message: str, endpoint: str, provider: str | None = None) -> None:
        self.endpoint = endpoint
        super().__init__(message, provider=provider)


class MissingEndpointConfigError(EndpointConfigError):
    """Raised when an endpoint name is not configured for the provider."""

    def __init__(self, endpoint: str, provider: str | None = None) -> None:
        super().__init__(
            f"Missing api endpoint config for provider {provider!r}, endpoint {endpoint!r}",
            endpoint=endpoint,
            provider=provider,
        )


class BadEndpointConfigError(EndpointConfigError):
    """Raised when an endpoint entry exists but its url or method is invalid."""

    pass


# =============================================================================
# Authentication errors
# =============================================================================


class AuthenticationError(ApiDispatchError):
    """Raised when a request cannot be authenticated."""

    pass


class MissingCredentialsError(AuthenticationError):
    """Raised when a token or credentials are still absent at send time.

    The configuration lookup has already been attempted when this is raised.
    """

    pass


class BadAuthenticationTypeError(AuthenticationError):
    """Raised when a strategy holds an authentication type it cannot apply."""

    def __init__(self, authentication_type: object, provider: str | None = None) -> None:
        self.authentication_type = authentication_type
        super().__init__(
            f"Invalid authentication type {authentication_type!r} for Http client",
            provider=provider,
        )


# =============================================================================
# Request errors
# =============================================================================


class RequestError(ApiDispatchError):
    """Raised when a logical request is rejected before it is sent."""

    pass


class BadHttpMethodError(RequestError):
    """Raised when a verb outside get/post/put/patch/delete/head is dispatched."""

    def __init__(self, method: object, provider: str | None = None) -> None:
        self.method = method
        super().__init__(f"Bad api call method: {method!r}", provider=provider)


class BadRequestUrlError(RequestError):
    """Raised when a request is dispatched without a url."""

    pass


__all__ = [
    "ApiDispatchError",
    "ConfigurationError",
    "MissingProviderConfigError",
    "InvalidAuthenticationTypeError",
    "EndpointConfigError",
    "MissingEndpointConfigError",
    "BadEndpointConfigError",
    "AuthenticationError",
    "MissingCredentialsError",
    "BadAuthenticationTypeError",
    "RequestError",
    "BadHttpMethodError",
    "BadRequestUrlError",
]
