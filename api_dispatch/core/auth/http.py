"""HTTP credential authentication: basic auth header or query parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from api_dispatch.core.auth.base import AuthenticationStrategy, SendableRequest
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.endpoints import HttpMethod
from api_dispatch.core.exceptions import BadAuthenticationTypeError, MissingCredentialsError

AUTHENTICATION_TYPE_BASIC = "basic"
AUTHENTICATION_TYPE_QUERY = "query"

_TYPE_PREFIXES = ("http:", "http-")


def normalize_authentication_type(value: str) -> str:
    """Strip the ``http:``/``http-`` prefix: "http:basic" -> "basic"."""
    cleaned = value.strip().lower()
    for prefix in _TYPE_PREFIXES:
        if cleaned.startswith(prefix):
            return cleaned[len(prefix) :]
    return cleaned


class HttpStrategy(AuthenticationStrategy):
    """Authenticates with credentials, either as basic auth or in the payload.

    ``basic`` requires ``username`` and ``password`` credentials and sends
    them in the standard Authorization header. ``query`` adds every
    credential entry to the request payload (query string for GET/HEAD,
    JSON body otherwise); entries in the call's own data win on key
    collisions.

    Credentials and type come from the strategy when set, otherwise from
    ``authentication.credentials`` and ``authentication.type`` in the
    provider configuration (read once on first access). Empty explicit
    credentials count as unset.
    """

    def __init__(
        self,
        config: ConfigSource | None = None,
        provider_name: str | None = None,
        authentication_type: str | None = None,
        credentials: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(config, provider_name)
        self._authentication_type: str | None = None
        self._credentials: dict[str, Any] | None = None
        self._configured_credentials: dict[str, Any] | None = None
        if authentication_type is not None:
            self.set_authentication_type(authentication_type)
        if credentials is not None:
            self.set_credentials(credentials)

    def set_authentication_type(self, authentication_type: str) -> HttpStrategy:
        self._authentication_type = normalize_authentication_type(authentication_type)
        return self

    def get_authentication_type(self) -> str:
        if self._authentication_type is None:
            configured = self._config_value("authentication.type", AUTHENTICATION_TYPE_BASIC)
            self.set_authentication_type(str(configured))
        return self._authentication_type  # type: ignore[return-value]

    def set_credentials(self, credentials: Mapping[str, Any]) -> HttpStrategy:
        self._credentials = dict(credentials)
        return self

    def get_credentials(self) -> dict[str, Any]:
        """Return the credentials to authenticate with.

        Explicit credentials win when non-empty; an empty mapping falls back
        to the provider configuration like unset credentials do.
        """
        if self._credentials:
            return self._credentials

        if self._configured_credentials is None:
            configured = self._config_value("authentication.credentials", {})
            self._configured_credentials = (
                dict(configured) if isinstance(configured, Mapping) else {}
            )
        return self._configured_credentials

    def _authenticate(self, method: HttpMethod, url: str, data: dict[str, Any]) -> SendableRequest:
        credentials = self.get_credentials()
        authentication_type = self.get_authentication_type()

        if authentication_type == AUTHENTICATION_TYPE_BASIC:
            username = credentials.get("username")
            password = credentials.get("password")
            if not username or not password:
                raise MissingCredentialsError(
                    "Invalid authentication credentials for http client with basic authentication",
                    provider=self.provider_name,
                )
            return self._build(method, url, data, auth=(str(username), str(password)))

        if authentication_type == AUTHENTICATION_TYPE_QUERY:
            if not credentials:
                raise MissingCredentialsError(
                    "Invalid authentication credentials for http client with query authentication",
                    provider=self.provider_name,
                )
            return self._build(method, url, data, auth_params=credentials)

        raise BadAuthenticationTypeError(authentication_type, provider=self.provider_name)
