"""Replicate prediction provider."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import httpx

from config.generation.providers import replicate as replicate_config
from core.exceptions import ConfigurationError, ProviderUnavailableError
from core.providers.base import BaseGenerationProvider
from core.utils.env import get_env

logger = logging.getLogger(__name__)

_SUCCESS_STATUSES = {"succeeded"}
_PENDING_STATUSES = {"starting", "processing"}
_FAILURE_STATUSES = {"failed", "canceled"}


def build_prediction_request(
    base_url: str, model: str, input: Mapping[str, Any]
) -> tuple[str, dict[str, Any]]:
    """Return the create-prediction URL and JSON body for ``model``.

    ``owner/name:version`` pins a community model version; a bare
    ``owner/name`` targets an official model's latest deployment.
    """

    model = (model or "").strip()
    if not model or "/" not in model:
        raise ConfigurationError(f"Invalid Replicate model identifier: {model!r}", key="model")

    if ":" in model:
        _, version = model.split(":", 1)
        return f"{base_url}/predictions", {"version": version, "input": dict(input)}

    return f"{base_url}/models/{model}/predictions", {"input": dict(input)}


class ReplicateGenerationProvider(BaseGenerationProvider):
    """Run hosted models through the Replicate HTTP API."""

    provider_name = "replicate"

    def __init__(
        self,
        api_token: str | None = None,
        *,
        base_url: str | None = None,
        poll_interval: float | None = None,
        request_timeout: float | None = None,
        sync_wait_seconds: int | None = None,
    ) -> None:
        token = api_token or get_env("REPLICATE_API_TOKEN")
        if not token:
            raise ConfigurationError("REPLICATE_API_TOKEN not configured", key="REPLICATE_API_TOKEN")

        self.api_token = token
        self.base_url = (base_url or replicate_config.API_BASE_URL).rstrip("/")
        self.poll_interval = (
            replicate_config.POLL_INTERVAL if poll_interval is None else poll_interval
        )
        self.request_timeout = request_timeout or replicate_config.REQUEST_TIMEOUT
        self.sync_wait_seconds = sync_wait_seconds or replicate_config.SYNC_WAIT_SECONDS

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
            "Prefer": f"wait={self.sync_wait_seconds}",
        }

    async def run(self, model: str, input: Mapping[str, Any]) -> Any:
        """Create a prediction and wait until it reaches a terminal status."""

        url, body = build_prediction_request(self.base_url, model, input)
        logger.info("Creating Replicate prediction (model=%s)", model)

        try:
            async with httpx.AsyncClient(timeout=self.request_timeout) as client:
                response = await client.post(url, json=body, headers=self._headers())
                prediction = self._parse(response, model)

                while True:
                    status = (prediction.get("status") or "").lower()
                    if status in _SUCCESS_STATUSES:
                        logger.info(
                            "Replicate prediction succeeded (model=%s, id=%s)",
                            model,
                            prediction.get("id"),
                        )
                        return prediction.get("output")
                    if status in _FAILURE_STATUSES:
                        raise ProviderUnavailableError(
                            f"Replicate prediction {status}: {prediction.get('error') or 'no details'}",
                            provider=self.provider_name,
                        )
                    if status not in _PENDING_STATUSES:
                        raise ProviderUnavailableError(
                            f"Replicate returned unknown prediction status {status!r}",
                            provider=self.provider_name,
                        )

                    poll_url = (prediction.get("urls") or {}).get("get")
                    if not poll_url:
                        raise ProviderUnavailableError(
                            "Replicate prediction is pending but has no polling URL",
                            provider=self.provider_name,
                        )

                    await asyncio.sleep(self.poll_interval)
                    response = await client.get(poll_url, headers=self._headers())
                    prediction = self._parse(response, model)
        except httpx.HTTPError as exc:
            logger.error("Replicate request failed (model=%s): %s", model, exc)
            raise ProviderUnavailableError(
                f"Replicate request failed: {exc}",
                provider=self.provider_name,
                original_error=exc,
            ) from exc

    def _parse(self, response: httpx.Response, model: str) -> dict[str, Any]:
        if response.status_code >= 400:
            logger.error(
                "Replicate API error %s (model=%s): %s",
                response.status_code,
                model,
                response.text,
            )
            raise ProviderUnavailableError(
                f"Replicate API error {response.status_code}",
                provider=self.provider_name,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderUnavailableError(
                "Replicate returned a non-JSON response",
                provider=self.provider_name,
                original_error=exc,
            ) from exc

        if not isinstance(data, dict):
            raise ProviderUnavailableError(
                "Replicate returned an unexpected prediction payload",
                provider=self.provider_name,
            )
        return data


__all__ = ["ReplicateGenerationProvider", "build_prediction_request"]
