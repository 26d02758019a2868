"""Generation gateway: one prompt in, one normalized asset URL out."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from config.generation.defaults import GENERATION_TIMEOUT_SECONDS
from core.exceptions import ProviderError, ProviderUnavailableError, ServiceError
from core.observability import render_payload_preview
from core.providers.base import BaseGenerationProvider
from features.generation.models import GenerationRequest, GenerationResult, MediaKind
from features.generation.normalization import normalize_output

logger = logging.getLogger(__name__)


class GenerationGateway:
    """Run a prompt against a hosted model and return a :class:`GenerationResult`.

    The gateway owns the provider call, the timeout around it and output
    normalization. When ``fallback_model`` is configured (video), a failed
    primary attempt triggers exactly one call to the fallback model; if that
    also fails, the primary failure is raised.
    """

    def __init__(
        self,
        provider: BaseGenerationProvider,
        *,
        media_kind: MediaKind,
        model: str,
        parameters: Optional[Mapping[str, Any]] = None,
        fallback_model: Optional[str] = None,
        fallback_parameters: Optional[Mapping[str, Any]] = None,
        fallback_provider: Optional[BaseGenerationProvider] = None,
        timeout: float | None = None,
    ) -> None:
        self.provider = provider
        self.media_kind = media_kind
        self.model = model
        self.parameters: Dict[str, Any] = dict(parameters or {})
        self.fallback_model = fallback_model
        self.fallback_parameters: Dict[str, Any] = dict(fallback_parameters or {})
        self.fallback_provider = fallback_provider or provider
        self.timeout = GENERATION_TIMEOUT_SECONDS if timeout is None else timeout

    def build_request(self, caller_id: int, prompt: str) -> GenerationRequest:
        return GenerationRequest(
            caller_id=caller_id,
            prompt=prompt,
            media_kind=self.media_kind,
            model_parameters=dict(self.parameters),
        )

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Generate one asset for ``request``.

        Raises:
            ProviderUnavailableError: transport failure, failed job, timeout or an
                unexpected exception raised by the provider.
            EmptyProviderResponseError: no URL could be extracted.
            MalformedAssetUrlError: the extracted value is not an http URL.
        """

        try:
            raw = await self._invoke(self.provider, self.model, request.prompt, request.model_parameters)
            url = self._normalize(raw, provider=self.provider.provider_name)
        except ProviderError as primary_error:
            if not self.fallback_model:
                raise
            logger.warning(
                "Primary %s model %s failed (%s); trying fallback %s",
                self.media_kind.value,
                self.model,
                primary_error,
                self.fallback_model,
            )
            url = await self._run_fallback(request, primary_error)

        return GenerationResult(asset_url=url, media_kind=self.media_kind)

    async def _run_fallback(self, request: GenerationRequest, primary_error: ProviderError) -> str:
        provider = self.fallback_provider
        try:
            raw = await self._invoke(provider, self.fallback_model, request.prompt, self.fallback_parameters)
            url = self._normalize(raw, provider=provider.provider_name, array_only=True)
        except ProviderError as fallback_error:
            logger.error(
                "Fallback %s model %s failed: %s",
                self.media_kind.value,
                self.fallback_model,
                fallback_error,
            )
            raise primary_error from fallback_error

        logger.info("Fallback %s model %s produced %s", self.media_kind.value, self.fallback_model, url)
        return url

    async def _invoke(
        self,
        provider: BaseGenerationProvider,
        model: str,
        prompt: str,
        parameters: Mapping[str, Any],
    ) -> Any:
        payload = {"prompt": prompt, **parameters}
        try:
            raw = await asyncio.wait_for(provider.run(model, payload), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error("Generation timed out after %ss (model=%s)", self.timeout, model)
            raise ProviderUnavailableError(
                f"Generation timed out after {self.timeout} seconds",
                provider=provider.provider_name,
                original_error=exc,
            ) from exc
        except ServiceError:
            raise
        except Exception as exc:
            logger.error("Provider %s failed for model %s: %s", provider.provider_name, model, exc, exc_info=True)
            raise ProviderUnavailableError(
                f"Provider call failed: {exc}",
                provider=provider.provider_name,
                original_error=exc,
            ) from exc

        logger.debug("Raw %s output from %s: %s", self.media_kind.value, model, render_payload_preview(raw))
        return raw

    def _normalize(self, raw: Any, *, provider: str, array_only: bool = False) -> str:
        try:
            return normalize_output(raw, self.media_kind, provider=provider, array_only=array_only)
        except ProviderError as exc:
            logger.error(
                "Could not extract %s URL (%s): raw output %s",
                self.media_kind.value,
                exc,
                render_payload_preview(raw),
            )
            raise


__all__ = ["GenerationGateway"]
