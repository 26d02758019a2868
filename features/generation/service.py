"""Request handling for generation: identity, validation, quota, then generate."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from config.billing import UPGRADE_MESSAGE
from core.auth import AuthenticationError
from core.exceptions import ConfigurationError, QuotaExceededError, ValidationError
from features.billing.protocols import EntitlementStore, UsageLedger
from features.generation.gateway import GenerationGateway
from features.generation.models import GenerationResult, MediaKind

logger = logging.getLogger(__name__)


class GenerationService:
    """Orchestrate one generation request for an authenticated caller.

    Usage is charged strictly after the gateway returns a result, and only for
    callers without an active paid entitlement. Any failure before that point
    leaves the ledger untouched.
    """

    def __init__(
        self,
        gateways: Mapping[MediaKind, GenerationGateway],
        ledger: UsageLedger,
        entitlements: EntitlementStore,
    ) -> None:
        self._gateways = dict(gateways)
        self._ledger = ledger
        self._entitlements = entitlements

    def _gateway_for(self, media_kind: MediaKind) -> GenerationGateway:
        gateway = self._gateways.get(media_kind)
        if gateway is None:
            raise ConfigurationError(
                f"No generation gateway configured for {media_kind.value}",
                key="media_kind",
            )
        return gateway

    async def generate(
        self,
        caller_id: Optional[int],
        prompt: Optional[str],
        media_kind: MediaKind,
    ) -> GenerationResult:
        if caller_id is None:
            raise AuthenticationError("Unauthorized", reason="caller_missing")

        if prompt is None or not prompt.strip():
            raise ValidationError("Prompt is required", field="prompt")

        gateway = self._gateway_for(media_kind)

        has_allowance = await self._ledger.check_remaining(caller_id)
        is_pro = await self._entitlements.is_active(caller_id)
        if not has_allowance and not is_pro:
            logger.info("Quota exhausted (caller_id=%s, media=%s)", caller_id, media_kind.value)
            raise QuotaExceededError(UPGRADE_MESSAGE, caller_id=caller_id)

        request = gateway.build_request(caller_id, prompt)
        result = await gateway.generate(request)

        if not is_pro:
            await self._ledger.increment(caller_id)

        logger.info(
            "Generated %s asset (caller_id=%s, pro=%s)",
            media_kind.value,
            caller_id,
            is_pro,
        )
        return result


__all__ = ["GenerationService"]
