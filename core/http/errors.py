"""Error payloads placed in ``HTTPException.detail`` by the routes.

Every payload has ``error`` (a :class:`GenerationErrorKind` value or a generic
category) and a user-facing ``message``; ``context`` is added only when there
is something safe to show. Raw provider output never leaves the server.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from core.exceptions import (
    ConfigurationError,
    EmptyProviderResponseError,
    MalformedAssetUrlError,
    ProviderError,
    QuotaExceededError,
    ValidationError,
)

ErrorPayload = Dict[str, Any]


def _payload(error: str, message: str, **context: Any) -> ErrorPayload:
    payload: ErrorPayload = {"error": error, "message": message}
    shown = {key: value for key, value in context.items() if value is not None}
    if shown:
        payload["context"] = shown
    return payload


def format_validation_error(exc: ValidationError) -> ErrorPayload:
    return _payload(exc.kind.value, str(exc), field=exc.field)


def format_quota_error(exc: QuotaExceededError) -> ErrorPayload:
    """The client opens its upgrade prompt when ``upgrade_required`` is set."""

    return _payload(exc.kind.value, str(exc), upgrade_required=True)


def format_provider_error(exc: ProviderError, media_label: str = "media") -> ErrorPayload:
    """Provider failures get a fixed message; the provider detail is only logged."""

    if isinstance(exc, (EmptyProviderResponseError, MalformedAssetUrlError)):
        message = f"Failed to generate {media_label} URL"
    else:
        message = f"Failed to generate {media_label}"
    return _payload(exc.kind.value, message, provider=exc.provider or None)


def format_configuration_error(exc: ConfigurationError) -> ErrorPayload:
    return _payload("configuration_error", str(exc), key=exc.key or None)


def format_service_error(exc: Exception, message: Optional[str] = None) -> ErrorPayload:
    return _payload("service_error", message or str(exc))


__all__ = [
    "ErrorPayload",
    "format_configuration_error",
    "format_provider_error",
    "format_quota_error",
    "format_service_error",
    "format_validation_error",
]
