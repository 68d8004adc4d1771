"""Authentication strategies.

- BearerStrategy: ``Authorization: Bearer <token>``
- HttpStrategy: basic auth header, or credentials injected as query/body fields
"""

from api_dispatch.core.auth.base import AuthenticationStrategy, SendableRequest
from api_dispatch.core.auth.bearer import BearerStrategy
from api_dispatch.core.auth.http import (
    AUTHENTICATION_TYPE_BASIC,
    AUTHENTICATION_TYPE_QUERY,
    HttpStrategy,
    normalize_authentication_type,
)

__all__ = [
    "AuthenticationStrategy",
    "SendableRequest",
    "BearerStrategy",
    "HttpStrategy",
    "AUTHENTICATION_TYPE_BASIC",
    "AUTHENTICATION_TYPE_QUERY",
    "normalize_authentication_type",
]
