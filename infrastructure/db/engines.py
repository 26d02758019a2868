"""Async database engine management utilities.

Supports PostgreSQL (asyncpg), MySQL (aiomysql) and SQLite (aiosqlite); the
driver is taken from the URL scheme.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from config.database.defaults import (
    ECHO as DB_ECHO,
    MAX_OVERFLOW as DB_MAX_OVERFLOW,
    POOL_RECYCLE as DB_POOL_RECYCLE,
    POOL_SIZE as DB_POOL_SIZE,
)
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

AsyncSessionFactory = async_sessionmaker[AsyncSession]


def create_engine(
    url: str,
    *,
    echo: bool = DB_ECHO,
    pool_size: int = DB_POOL_SIZE,
    max_overflow: int = DB_MAX_OVERFLOW,
    pool_recycle: int = DB_POOL_RECYCLE,
    url_key: str = "MAIN_DB_URL",
) -> AsyncEngine:
    """Create an async SQLAlchemy engine for ``url``."""

    if not url:
        raise ConfigurationError("Database connection URL is required", key=url_key)

    if url.startswith("sqlite"):
        # SQLite pools reject the sizing arguments below
        logger.debug("Creating SQLite engine for %s", url_key)
        return create_async_engine(url, echo=echo)

    if url.startswith("postgresql"):
        connect_args: dict = {"command_timeout": 10}
    else:
        connect_args = {"connect_timeout": 5}

    return create_async_engine(
        url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=pool_recycle,
        pool_pre_ping=True,
        isolation_level="READ COMMITTED",
        connect_args=connect_args,
    )


def get_session_factory(engine: AsyncEngine) -> AsyncSessionFactory:
    """Return an ``async_sessionmaker`` bound to ``engine``."""

    return async_sessionmaker(engine, expire_on_commit=False)


__all__ = [
    "AsyncSessionFactory",
    "create_engine",
    "get_session_factory",
]
