"""Endpoint configuration resolution.

Turns one provider endpoint entry plus the provider's ``rootUrl`` into a
validated ``(url, method)`` pair. An entry is either a bare path string,
which is always a GET, or a table with a required ``url`` and an optional
``method`` (default ``get``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from api_dispatch.core.exceptions import (
    BadEndpointConfigError,
    BadHttpMethodError,
    MissingEndpointConfigError,
)


class HttpMethod(str, Enum):
    """The HTTP verbs a provider endpoint may use."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"

    @classmethod
    def parse(cls, value: object) -> HttpMethod:
        """Return the verb for ``value`` (case-insensitive).

        Raises:
            BadHttpMethodError: If value is not one of the six verbs
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise BadHttpMethodError(value)

    @property
    def sends_query(self) -> bool:
        """GET and HEAD carry their payload in the query string."""
        return self in (HttpMethod.GET, HttpMethod.HEAD)


@dataclass(frozen=True)
class ResolvedEndpoint:
    url: str
    method: HttpMethod


def compose_url(*parts: str | None) -> str:
    """Join url parts with single slashes.

    Each part is stripped of leading and trailing slashes and empty parts are
    dropped. An absolute endpoint url under a non-empty root is joined like
    any other path segment.
    """
    trimmed = (part.strip("/") for part in parts if isinstance(part, str))
    return "/".join(part for part in trimmed if part)


def _bad_url(endpoint_name: str, provider_name: str | None) -> BadEndpointConfigError:
    return BadEndpointConfigError(
        f"Bad url in api endpoint config for provider {provider_name!r}, "
        f"endpoint {endpoint_name!r}",
        endpoint=endpoint_name,
        provider=provider_name,
    )


def resolve_endpoint(
    provider_config: Mapping[str, Any] | None,
    endpoint_name: str,
    provider_name: str | None = None,
) -> ResolvedEndpoint:
    """Resolve a named endpoint of a provider.

    Args:
        provider_config: The provider's configuration subtree (may be None).
        endpoint_name: Key under the provider's ``endpoints`` table.
        provider_name: Used in error messages only.

    Returns:
        A ResolvedEndpoint with a non-empty url and a valid method.

    Raises:
        MissingEndpointConfigError: If the endpoint is not configured.
        BadEndpointConfigError: If the entry has no url or an invalid method.
    """
    provider_config = provider_config or {}
    endpoints = provider_config.get("endpoints")
    if not isinstance(endpoints, Mapping) or endpoint_name not in endpoints:
        raise MissingEndpointConfigError(endpoint_name, provider=provider_name)
    # A present entry that is null is malformed, not missing
    endpoint_config = endpoints[endpoint_name]

    root_url = provider_config.get("rootUrl") or ""

    if isinstance(endpoint_config, str):
        url = compose_url(root_url, endpoint_config)
        if not url:
            raise _bad_url(endpoint_name, provider_name)
        return ResolvedEndpoint(url=url, method=HttpMethod.GET)

    if not isinstance(endpoint_config, Mapping):
        raise BadEndpointConfigError(
            f"Api endpoint config for provider {provider_name!r}, endpoint "
            f"{endpoint_name!r} must be a path or a table, got "
            f"{type(endpoint_config).__name__}",
            endpoint=endpoint_name,
            provider=provider_name,
        )

    endpoint_url = endpoint_config.get("url")
    if not endpoint_url or not isinstance(endpoint_url, str):
        raise _bad_url(endpoint_name, provider_name)

    configured_method = endpoint_config.get("method")
    try:
        method = HttpMethod.parse(
            HttpMethod.GET if configured_method is None else configured_method
        )
    except BadHttpMethodError as e:
        raise BadEndpointConfigError(
            f"Bad method {configured_method!r} in api endpoint config for "
            f"provider {provider_name!r}, endpoint {endpoint_name!r}",
            endpoint=endpoint_name,
            provider=provider_name,
        ) from e

    url = compose_url(root_url, endpoint_url)
    if not url:
        # e.g. url = "/" with no rootUrl
        raise _bad_url(endpoint_name, provider_name)

    return ResolvedEndpoint(url=url, method=method)
