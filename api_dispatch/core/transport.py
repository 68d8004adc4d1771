"""
HTTP transport abstraction for api_dispatch.

Provides a testable interface for sending prepared requests, using httpx
as the default implementation. The transport does not retry, does not
raise for HTTP error statuses and does not decode responses: the
httpx.Response is handed back to the caller unchanged.
"""

from __future__ import annotations

import abc
import logging
import typing

import httpx

from api_dispatch.core.auth.base import SendableRequest

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpTransport(abc.ABC):
    """Abstract transport used by api clients.

    Implementations must provide send() for a fully prepared request.
    """

    @abc.abstractmethod
    def send(self, request: SendableRequest, timeout: float | None = None) -> httpx.Response:
        """Send a prepared request.

        Args:
            request: Authenticated request produced by a strategy
            timeout: Optional timeout override in seconds

        Returns:
            The transport response, unchanged

        Raises:
            httpx.HTTPError: On network failures and timeouts
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        return None

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class HttpxTransport(HttpTransport):
    """Default transport backed by a pooled httpx.Client.

    Example:
        >>> transport = HttpxTransport(timeout=10)
        >>> response = transport.send(
        ...     SendableRequest(method=HttpMethod.GET, url="https://example.com/ping")
        ... )
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Default request timeout in seconds
            client: Pre-configured httpx.Client (owned by the caller)
        """
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def send(self, request: SendableRequest, timeout: float | None = None) -> httpx.Response:
        kwargs: dict[str, typing.Any] = {}
        if request.headers:
            kwargs["headers"] = request.headers
        if request.params is not None:
            kwargs["params"] = request.params
        if request.json is not None:
            kwargs["json"] = request.json
        if request.auth is not None:
            kwargs["auth"] = httpx.BasicAuth(*request.auth)
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)

        _logger.debug(
            "HTTP %s %s (timeout=%ss)",
            request.method.value.upper(),
            request.url,
            timeout if timeout is not None else self.timeout,
        )

        response = self._client.request(request.method.value.upper(), request.url, **kwargs)

        _logger.debug(
            "HTTP %s from %s (body=%d bytes)",
            response.status_code,
            request.url,
            len(response.content),
        )
        return response

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


__all__ = [
    "DEFAULT_TIMEOUT",
    "HttpTransport",
    "HttpxTransport",
]
