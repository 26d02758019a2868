"""Usage ledger backed by the ``user_api_limits`` table."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.billing import FREE_TIER_LIMIT
from features.billing.db_models import UserApiLimit

logger = logging.getLogger(__name__)


class SqlUsageLedger:
    """Count free-tier generations per caller.

    The increment is a single ``UPDATE ... SET count = count + 1`` so
    concurrent requests from one caller never lose an increment. The first
    increment inserts the row inside a savepoint and falls back to the update
    if a concurrent request inserted it first.
    """

    def __init__(self, session: AsyncSession, limit: int = FREE_TIER_LIMIT) -> None:
        self.session = session
        self.limit = limit

    async def get_count(self, caller_id: int) -> int:
        stmt = select(UserApiLimit.count).where(UserApiLimit.user_id == caller_id)
        result = await self.session.execute(stmt)
        count = result.scalar_one_or_none()
        return int(count or 0)

    async def check_remaining(self, caller_id: int) -> bool:
        return await self.get_count(caller_id) < self.limit

    async def increment(self, caller_id: int) -> None:
        if await self._bump(caller_id):
            return

        try:
            async with self.session.begin_nested():
                self.session.add(UserApiLimit(user_id=caller_id, count=1))
        except IntegrityError:
            logger.debug("Usage row for caller %s created concurrently; retrying update", caller_id)
            await self._bump(caller_id)

        logger.debug("Usage incremented for caller %s", caller_id)

    async def _bump(self, caller_id: int) -> bool:
        stmt = (
            update(UserApiLimit)
            .where(UserApiLimit.user_id == caller_id)
            .values(count=UserApiLimit.count + 1)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0


__all__ = ["SqlUsageLedger"]
