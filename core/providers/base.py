"""Base Provider Interface - Abstract Contract for Hosted Generation Providers
All hosted media generation backends implement :class:`BaseGenerationProvider`.
A provider accepts a model identifier plus an input mapping, blocks until the
provider-side job reaches a terminal state, and returns the job output exactly
as the provider produced it. Turning that output into an asset URL is the
gateway's job (see features/generation/normalization.py), not the provider's.

Provider Lifecycle:
    1. Provider class registered via register_generation_provider()
    2. get_generation_provider() instantiates it by name
    3. The gateway calls run() with the media kind's fixed parameters
    4. Failures surface as ProviderUnavailableError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class BaseGenerationProvider(ABC):
    """Base interface for hosted media generation providers."""

    provider_name: str = "generation"

    @abstractmethod
    async def run(self, model: str, input: Mapping[str, Any]) -> Any:
        """Run ``model`` with ``input`` to completion and return its raw output.

        Raises:
            ProviderUnavailableError: network failure, HTTP error, or a job that
                finished in a failed or cancelled state.
        """


__all__ = ["BaseGenerationProvider"]
