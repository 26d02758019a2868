"""Caller identity: HS256 bearer tokens resolved to a caller id."""

from .jwt import (
    AuthContext,
    AuthenticationError,
    authenticate_bearer_token,
    create_auth_token,
    require_auth_context,
)

__all__ = [
    "AuthContext",
    "AuthenticationError",
    "authenticate_bearer_token",
    "create_auth_token",
    "require_auth_context",
]
