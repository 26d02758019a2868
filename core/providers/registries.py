"""Provider Registries - Global registry for generation providers."""

from __future__ import annotations

from typing import Dict, Type

from core.providers.base import BaseGenerationProvider

_generation_providers: Dict[str, Type[BaseGenerationProvider]] = {}


def register_generation_provider(name: str, provider_class: Type[BaseGenerationProvider]) -> None:
    """Register a generation provider implementation."""
    _generation_providers[name] = provider_class
