"""Entitlement lookups backed by the ``user_subscriptions`` table."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.billing import SUBSCRIPTION_GRACE_SECONDS
from features.billing.db_models import UserSubscription


class SqlEntitlementStore:
    """Resolve whether a caller holds an active paid plan."""

    def __init__(
        self,
        session: AsyncSession,
        grace_seconds: int = SUBSCRIPTION_GRACE_SECONDS,
    ) -> None:
        self.session = session
        self.grace = timedelta(seconds=grace_seconds)

    async def get_subscription(self, caller_id: int) -> Optional[UserSubscription]:
        stmt = select(UserSubscription).where(UserSubscription.user_id == caller_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def is_active(self, caller_id: int, *, now: datetime | None = None) -> bool:
        subscription = await self.get_subscription(caller_id)
        if subscription is None or not subscription.stripe_price_id:
            return False

        period_end = subscription.stripe_current_period_end
        if period_end is None:
            return False
        # SQLite hands back naive datetimes; stored values are UTC
        if period_end.tzinfo is None:
            period_end = period_end.replace(tzinfo=timezone.utc)

        current = now or datetime.now(timezone.utc)
        return period_end + self.grace > current


__all__ = ["SqlEntitlementStore"]
