"""Session management utilities for the main database."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config.database import urls as db_urls
from core.exceptions import DatabaseError
from infrastructure.db.engines import create_engine, get_session_factory

logger = logging.getLogger(__name__)

# Lazy-loaded engine and session factory
main_engine: Optional[AsyncEngine] = None
main_session_factory: Optional[async_sessionmaker] = None


@asynccontextmanager
async def session_scope(factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations."""

    session = factory()
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise DatabaseError("Database operation failed", operation="transaction") from exc
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


def require_main_engine() -> AsyncEngine:
    """Return the main engine, creating it from ``MAIN_DB_URL`` on first use."""
    global main_engine

    if main_engine is None:
        main_engine = create_engine(db_urls.MAIN_DB_URL, url_key="MAIN_DB_URL")
    return main_engine


def require_main_session_factory() -> async_sessionmaker:
    """Return the main session factory or raise a configuration error."""
    global main_session_factory

    if main_session_factory is None:
        main_session_factory = get_session_factory(require_main_engine())
    return main_session_factory


async def dispose_main_engine() -> None:
    """Dispose the main engine if it was initialised."""
    global main_engine, main_session_factory

    if main_engine is None:
        return
    try:
        await main_engine.dispose()
    finally:
        main_engine = None
        main_session_factory = None


__all__ = [
    "session_scope",
    "require_main_engine",
    "require_main_session_factory",
    "dispose_main_engine",
]
