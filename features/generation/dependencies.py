"""FastAPI dependencies wiring the generation service."""

from __future__ import annotations

from typing import Dict

from fastapi import Depends

from config.generation import models as model_config
from core.config import settings
from core.providers import get_generation_provider
from features.billing.dependencies import get_entitlement_store, get_usage_ledger
from features.billing.protocols import EntitlementStore, UsageLedger
from features.generation.gateway import GenerationGateway
from features.generation.models import MediaKind
from features.generation.service import GenerationService


def build_gateways(provider_name: str | None = None) -> Dict[MediaKind, GenerationGateway]:
    """Return one configured gateway per media kind."""

    provider = get_generation_provider(provider_name or settings.generation_provider)
    timeout = settings.generation_timeout_seconds

    return {
        MediaKind.AUDIO: GenerationGateway(
            provider,
            media_kind=MediaKind.AUDIO,
            model=model_config.MUSIC_MODEL,
            parameters=model_config.MUSIC_PARAMETERS,
            timeout=timeout,
        ),
        MediaKind.VIDEO: GenerationGateway(
            provider,
            media_kind=MediaKind.VIDEO,
            model=model_config.VIDEO_MODEL,
            parameters=model_config.VIDEO_PARAMETERS,
            fallback_model=model_config.VIDEO_FALLBACK_MODEL or None,
            fallback_parameters=model_config.VIDEO_FALLBACK_PARAMETERS,
            timeout=timeout,
        ),
    }


def get_generation_service(
    ledger: UsageLedger = Depends(get_usage_ledger),
    entitlements: EntitlementStore = Depends(get_entitlement_store),
) -> GenerationService:
    return GenerationService(build_gateways(), ledger, entitlements)


__all__ = ["build_gateways", "get_generation_service"]
