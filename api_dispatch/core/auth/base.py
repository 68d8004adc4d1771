"""Authentication strategy base class and the prepared request it produces."""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.endpoints import HttpMethod
from api_dispatch.core.exceptions import BadRequestUrlError


@dataclass(frozen=True)
class SendableRequest:
    """A fully authenticated request, ready for the transport.

    Attributes:
        method: HTTP verb
        url: Final request url
        headers: Extra request headers (e.g. Authorization)
        params: Query string payload (GET/HEAD)
        json: JSON body payload (POST/PUT/PATCH/DELETE)
        auth: (username, password) for HTTP basic authentication
    """

    method: HttpMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: dict[str, Any] | None = None
    auth: tuple[str, str] | None = None


class AuthenticationStrategy(abc.ABC):
    """Turns a logical request (method, url, data) into a SendableRequest.

    Strategies read their defaults lazily from the provider's configuration
    subtree, so a value set on the strategy after construction but before a
    call is always honoured.

    Request data added through ``with_data`` is merged into every request.
    The payload of a request is built as::

        {**request_data, **authentication_params, **data}
    """

    def __init__(self, config: ConfigSource | None = None, provider_name: str | None = None) -> None:
        self.config = config or ConfigSource()
        self.provider_name = provider_name
        self._request_data: dict[str, Any] = {}

    @property
    def request_data(self) -> dict[str, Any]:
        return dict(self._request_data)

    def set_request_data(self, data: Mapping[str, Any]) -> AuthenticationStrategy:
        self._request_data = dict(data)
        return self

    def with_data(self, data: Mapping[str, Any]) -> AuthenticationStrategy:
        """Merge ``data`` into the request data sent with every call."""
        return self.set_request_data({**self._request_data, **data})

    def prepare(
        self,
        method: HttpMethod | str,
        url: str,
        data: Mapping[str, Any] | None = None,
    ) -> SendableRequest:
        """Build the authenticated request.

        Raises:
            BadHttpMethodError: If method is not one of the six verbs
            BadRequestUrlError: If url is empty
            AuthenticationError: If the strategy cannot authenticate
        """
        verb = HttpMethod.parse(method)
        if not url:
            raise BadRequestUrlError("No url for api client request", provider=self.provider_name)
        return self._authenticate(verb, url, dict(data or {}))

    @abc.abstractmethod
    def _authenticate(self, method: HttpMethod, url: str, data: dict[str, Any]) -> SendableRequest:
        pass

    def _config_value(self, key: str, default: Any = None) -> Any:
        return self.config.provider_value(self.provider_name, key, default)

    def _build(
        self,
        method: HttpMethod,
        url: str,
        data: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        auth_params: Mapping[str, Any] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> SendableRequest:
        payload = {**self._request_data, **(auth_params or {}), **data}
        return SendableRequest(
            method=method,
            url=url,
            headers=headers or {},
            params=payload if payload and method.sends_query else None,
            json=payload if payload and not method.sends_query else None,
            auth=auth,
        )
