"""Declarative base shared by the billing models."""

from __future__ import annotations

from typing import Final

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase

# Stable constraint names so migrations generated against any backend match
NAMING_CONVENTION: Final = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


metadata = Base.metadata


async def prepare_database(engine: AsyncEngine) -> None:
    """Create any missing ledger and subscription tables on ``engine``."""

    async with engine.begin() as connection:
        await connection.run_sync(metadata.create_all, checkfirst=True)


__all__: Final = ["Base", "NAMING_CONVENTION", "metadata", "prepare_database"]
