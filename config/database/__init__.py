"""Database settings: the ledger/subscription URL, pool sizing and table bootstrap."""

from .defaults import CREATE_TABLES, ECHO, MAX_OVERFLOW, POOL_RECYCLE, POOL_SIZE
from .urls import MAIN_DB_URL

__all__ = [
    "CREATE_TABLES",
    "ECHO",
    "MAIN_DB_URL",
    "MAX_OVERFLOW",
    "POOL_RECYCLE",
    "POOL_SIZE",
]
