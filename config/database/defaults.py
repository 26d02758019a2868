"""Database connection pool configuration."""

from __future__ import annotations

import os

POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "900"))
ECHO = os.getenv("DB_ECHO", "false").lower() == "true"
# Create missing tables at startup (local development and sqlite deployments)
CREATE_TABLES = os.getenv("DB_CREATE_TABLES", "false").lower() == "true"

__all__ = [
    "POOL_SIZE",
    "MAX_OVERFLOW",
    "POOL_RECYCLE",
    "ECHO",
    "CREATE_TABLES",
]
