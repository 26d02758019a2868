"""Provider Resolvers - Resolve generation providers by name at runtime."""

from __future__ import annotations

import logging

from core.exceptions import ConfigurationError
from core.providers.base import BaseGenerationProvider
from core.providers.registries import _generation_providers

logger = logging.getLogger(__name__)


def get_generation_provider(name: str) -> BaseGenerationProvider:
    """Return a generation provider instance registered under ``name``."""

    provider_name = (name or "").strip().lower()
    if provider_name not in _generation_providers:
        raise ConfigurationError(
            f"Generation provider {provider_name} not registered. "
            f"Available: {list(_generation_providers.keys())}",
            key=f"provider.{provider_name}",
        )

    provider_class = _generation_providers[provider_name]
    logger.debug(
        "Resolved generation provider instance %s for provider name %s",
        provider_class.__name__,
        provider_name,
    )
    return provider_class()
