"""Quota display routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from core.auth import AuthContext, require_auth_context
from core.pydantic_schemas import UsageResponse
from features.billing.dependencies import get_entitlement_store, get_usage_ledger
from features.billing.repositories.subscription_repository import SqlEntitlementStore
from features.billing.repositories.usage_repository import SqlUsageLedger

router = APIRouter(prefix="/api", tags=["billing"])
logger = logging.getLogger(__name__)


@router.get("/usage", response_model=UsageResponse)
async def get_usage(
    auth_context: AuthContext = Depends(require_auth_context),
    ledger: SqlUsageLedger = Depends(get_usage_ledger),
    entitlements: SqlEntitlementStore = Depends(get_entitlement_store),
) -> UsageResponse:
    """Return the caller's free-tier consumption and plan status."""

    caller_id = auth_context["caller_id"]
    count = await ledger.get_count(caller_id)
    is_pro = await entitlements.is_active(caller_id)

    logger.debug("Usage lookup (caller_id=%s, count=%s, is_pro=%s)", caller_id, count, is_pro)
    return UsageResponse(
        count=count,
        limit=ledger.limit,
        remaining=max(ledger.limit - count, 0),
        is_pro=is_pro,
    )
