"""Caller identity from HS256 bearer tokens.

Tokens are issued by the identity provider and signed with ``MY_AUTH_TOKEN``;
the ``id`` claim is the caller identifier the usage ledger and subscription
records are keyed on. ``create_auth_token`` exists for tooling and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any, Dict, Optional, TypedDict

from fastapi import Header, Query
from jose import ExpiredSignatureError, JWTError, jwt
from starlette import status

from core.utils.env import get_env

ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=30)


class AuthContext(TypedDict, total=False):
    """Resolved identity of the current caller."""

    caller_id: int
    email: Optional[str]
    token: str
    payload: Dict[str, Any]


@dataclass(slots=True)
class AuthenticationError(Exception):
    """The caller identity is missing or cannot be trusted."""

    message: str
    reason: str
    code: int = status.HTTP_401_UNAUTHORIZED

    def __str__(self) -> str:  # pragma: no cover - dataclass repr fallback
        return self.message


def _signing_key() -> str:
    key = get_env("MY_AUTH_TOKEN")
    if not key:
        raise AuthenticationError("Authentication secret is not configured", reason="configuration")
    return key


def create_auth_token(
    caller_id: int,
    email: str | None = None,
    expires_delta: timedelta = DEFAULT_TOKEN_TTL,
) -> str:
    """Sign a token for ``caller_id`` that expires after ``expires_delta``."""

    claims: Dict[str, Any] = {
        "id": caller_id,
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(claims, _signing_key(), algorithm=ALGORITHM)


def _pick_token(authorization: str | None, query_token: str | None) -> str | None:
    """Prefer the ``Authorization`` header; accept ``Bearer <t>`` or a bare token."""

    parts = (authorization or "").split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    if len(parts) == 1 and parts[0].lower() != "bearer":
        return parts[0]
    return (query_token or "").strip() or None


def _caller_id_from(claims: Dict[str, Any]) -> int:
    raw_id = claims.get("id")
    if raw_id is None:
        raise AuthenticationError("Authentication token missing caller id", reason="token_invalid")
    try:
        return int(raw_id)
    except (TypeError, ValueError) as exc:
        raise AuthenticationError("Invalid caller identifier in token", reason="token_invalid") from exc


def authenticate_bearer_token(
    *,
    authorization: str | None = None,
    query_token: str | None = None,
) -> AuthContext:
    """Validate the caller's token and return their :class:`AuthContext`."""

    token = _pick_token(authorization, query_token)
    if not token:
        raise AuthenticationError("Unauthorized", reason="token_missing")

    try:
        claims: Dict[str, Any] = jwt.decode(token, _signing_key(), algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise AuthenticationError("Authentication token has expired", reason="token_expired") from exc
    except JWTError as exc:
        raise AuthenticationError("Invalid authentication token", reason="token_invalid") from exc

    return AuthContext(
        caller_id=_caller_id_from(claims),
        email=claims.get("email"),
        token=token,
        payload=claims,
    )


def require_auth_context(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
    token: Annotated[str | None, Query(alias="token")] = None,
) -> AuthContext:
    """FastAPI dependency resolving the caller or raising 401."""

    return authenticate_bearer_token(authorization=authorization, query_token=token)


__all__ = [
    "ALGORITHM",
    "AuthContext",
    "AuthenticationError",
    "authenticate_bearer_token",
    "create_auth_token",
    "require_auth_context",
]
