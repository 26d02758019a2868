"""Database Infrastructure - Async SQLAlchemy Engine Management

One database backs the service: it holds the per-caller usage ledger and the
subscription records the entitlement check reads.

Connection Management:
    - Engine created lazily on first access (not at import time)
    - Connection pooling for server databases, driver defaults for SQLite
    - Automatic reconnection (pool_pre_ping=True)

FastAPI Integration Pattern:
    1. Dependency opens a session through session_scope()
    2. Repositories run statements on the session and never commit
    3. session_scope commits on success and rolls back on error

Usage Example:
    from infrastructure.db import require_main_session_factory, session_scope
    async with session_scope(require_main_session_factory()) as session:
        ledger = SqlUsageLedger(session)
        await ledger.increment(caller_id)
"""

from infrastructure.db.base import Base, metadata, prepare_database
from infrastructure.db.engines import (
    AsyncSessionFactory,
    create_engine,
    get_session_factory,
)
from infrastructure.db.sessions import (
    dispose_main_engine,
    require_main_engine,
    require_main_session_factory,
    session_scope,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "create_engine",
    "dispose_main_engine",
    "get_session_factory",
    "metadata",
    "prepare_database",
    "require_main_engine",
    "require_main_session_factory",
    "session_scope",
]
