"""Environment variable helpers shared by config and providers."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "get_node_env", "is_production"]


def get_env(key: str, default: str | None = None, *, required: bool = False) -> str | None:
    """Return an environment variable; blank values count as unset when required."""

    value = os.getenv(key, default)
    if required and not (value or "").strip():
        raise ConfigurationError(f"Required environment variable {key} not set", key=key)
    return value


def get_node_env() -> str:
    return (get_env("NODE_ENV", default="local") or "local").strip().lower()


def is_production() -> bool:
    return get_node_env() in ("production", "prod")
