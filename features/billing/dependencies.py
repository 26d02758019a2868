"""FastAPI dependencies for the billing collaborators."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from features.billing.repositories.subscription_repository import SqlEntitlementStore
from features.billing.repositories.usage_repository import SqlUsageLedger
from infrastructure.db import require_main_session_factory, session_scope


async def get_billing_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one transactional session shared by the ledger and entitlements."""

    session_factory = require_main_session_factory()
    async with session_scope(session_factory) as session:
        yield session


def get_usage_ledger(session: AsyncSession = Depends(get_billing_session)) -> SqlUsageLedger:
    return SqlUsageLedger(session, limit=settings.free_tier_limit)


def get_entitlement_store(
    session: AsyncSession = Depends(get_billing_session),
) -> SqlEntitlementStore:
    return SqlEntitlementStore(session, grace_seconds=settings.subscription_grace_seconds)


__all__ = ["get_billing_session", "get_entitlement_store", "get_usage_ledger"]
