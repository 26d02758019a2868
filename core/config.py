"""Minimal environment variable loading and settings dataclass.

Domain-specific configuration lives in config/ subdirectories:
- Generation models and provider settings: config.generation
- Free tier and subscriptions: config.billing
- Database: config.database

This module re-exports the environment helpers and offers a ``Settings``
dataclass for dependency injection.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from config import billing, database, generation
from config.environment import (
    ENVIRONMENT,
    IS_DEVELOPMENT,
    IS_PRODUCTION,
    IS_TEST,
    get_environment,
)

DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    """Dependency injection wrapper for cross-cutting settings."""

    environment: str = ENVIRONMENT
    debug_mode: bool = DEBUG_MODE
    version: str = APP_VERSION
    free_tier_limit: int = billing.FREE_TIER_LIMIT
    subscription_grace_seconds: int = billing.SUBSCRIPTION_GRACE_SECONDS
    generation_timeout_seconds: float = generation.GENERATION_TIMEOUT_SECONDS
    generation_provider: str = generation.DEFAULT_PROVIDER
    create_tables: bool = database.CREATE_TABLES


settings = Settings()

__all__ = [
    "get_environment",
    "ENVIRONMENT",
    "IS_DEVELOPMENT",
    "IS_PRODUCTION",
    "IS_TEST",
    "APP_VERSION",
    "DEBUG_MODE",
    "Settings",
    "settings",
]
