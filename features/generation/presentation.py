"""Client-side form controller for the generation endpoints.

A :class:`GenerationFormController` models one prompt form bound to a media
player: it submits at most one request at a time, tracks the loading state,
turns a 403 into an upgrade prompt instead of an error, and treats playback
failures as a recoverable error that clears the asset.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

import httpx

from core.exceptions import GenerationErrorKind
from features.generation.models import MediaKind

logger = logging.getLogger(__name__)

Callback = Callable[[], Union[None, Awaitable[None]]]

_ENDPOINTS = {
    MediaKind.AUDIO: "/api/music",
    MediaKind.VIDEO: "/api/video",
}
_GENERIC_ERROR = "Something went wrong"


class FormState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    UPGRADE_REQUIRED = "upgrade_required"
    ERROR = "error"


class SubmissionInProgressError(RuntimeError):
    """Raised when a form submits while its previous request is outstanding."""


async def _maybe_await(callback: Optional[Callback]) -> None:
    if callback is None:
        return
    result = callback()
    if result is not None:
        await result


def _extract_asset_url(body: Any) -> Optional[str]:
    if isinstance(body, list):
        body = body[0] if body else None
    if isinstance(body, dict):
        body = body.get("url") or body.get("audio")
    if isinstance(body, str) and body.startswith("http"):
        return body
    return None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or _GENERIC_ERROR
    if isinstance(body, dict):
        message = body.get("message")
        if not message and isinstance(body.get("detail"), dict):
            message = body["detail"].get("message")
        if message:
            return str(message)
    return _GENERIC_ERROR


class GenerationFormController:
    """State holder for one generation form instance."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        media_kind: MediaKind,
        *,
        on_refresh: Optional[Callback] = None,
        on_upgrade_required: Optional[Callback] = None,
    ) -> None:
        self._client = client
        self.media_kind = media_kind
        self._on_refresh = on_refresh
        self._on_upgrade_required = on_upgrade_required

        self.state = FormState.IDLE
        self.asset_url: Optional[str] = None
        self.error_message: Optional[str] = None
        self.error_kind: Optional[GenerationErrorKind] = None

    @property
    def is_loading(self) -> bool:
        return self.state is FormState.LOADING

    @property
    def can_submit(self) -> bool:
        return not self.is_loading

    async def submit(self, prompt: str) -> Optional[str]:
        """Send ``prompt`` and return the asset URL, or ``None`` on failure."""

        if self.is_loading:
            raise SubmissionInProgressError("A generation request is already in progress")

        self.state = FormState.LOADING
        self.asset_url = None
        self.error_message = None
        self.error_kind = None

        try:
            response = await self._client.post(_ENDPOINTS[self.media_kind], json={"prompt": prompt})
            await self._apply_response(response)
        except httpx.HTTPError as exc:
            logger.warning("Generation request failed: %s", exc)
            self._fail(_GENERIC_ERROR, GenerationErrorKind.PROVIDER_UNAVAILABLE)
        finally:
            await _maybe_await(self._on_refresh)

        return self.asset_url

    async def _apply_response(self, response: httpx.Response) -> None:
        if response.status_code == 403:
            self.state = FormState.UPGRADE_REQUIRED
            self.error_kind = GenerationErrorKind.QUOTA_EXCEEDED
            await _maybe_await(self._on_upgrade_required)
            return

        if response.status_code >= 400:
            kind = {
                400: GenerationErrorKind.BAD_REQUEST,
                401: GenerationErrorKind.UNAUTHORIZED,
            }.get(response.status_code, GenerationErrorKind.PROVIDER_UNAVAILABLE)
            self._fail(_error_message(response), kind)
            return

        try:
            body = response.json()
        except ValueError:
            body = response.text

        url = _extract_asset_url(body)
        if url is None:
            self._fail(f"Failed to generate {self.media_kind.value} URL", GenerationErrorKind.MALFORMED_ASSET_URL)
            return

        self.asset_url = url
        self.state = FormState.READY

    def _fail(self, message: str, kind: GenerationErrorKind) -> None:
        self.asset_url = None
        self.error_message = message
        self.error_kind = kind
        self.state = FormState.ERROR

    def report_playback_error(self, message: str | None = None) -> None:
        """Handle a media element error: drop the asset and allow a retry."""

        logger.info("Asset playback failed for %s: %s", self.asset_url, message)
        self._fail(
            message or f"The generated {self.media_kind.value} could not be played",
            GenerationErrorKind.ASSET_PLAYBACK_FAILURE,
        )


__all__ = ["FormState", "GenerationFormController", "SubmissionInProgressError"]
