"""Database URL configuration.

Environment Variables:
    - MAIN_DB_URL: SQLAlchemy async URL for the usage ledger and subscriptions
      (e.g. ``postgresql+asyncpg://...``, ``mysql+aiomysql://...`` or
      ``sqlite+aiosqlite:///./media.db``)
"""

from __future__ import annotations

import os

MAIN_DB_URL = os.getenv("MAIN_DB_URL", "")

__all__ = ["MAIN_DB_URL"]
