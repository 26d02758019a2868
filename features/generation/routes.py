"""Music and video generation HTTP routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from core.auth import AuthContext, require_auth_context
from core.exceptions import (
    ConfigurationError,
    DatabaseError,
    ProviderError,
    QuotaExceededError,
    ServiceError,
    ValidationError,
)
from core.http.errors import (
    format_configuration_error,
    format_provider_error,
    format_quota_error,
    format_service_error,
    format_validation_error,
)
from core.pydantic_schemas import GenerationRequestBody, GenerationResponse
from features.generation.dependencies import get_generation_service
from features.generation.models import MediaKind
from features.generation.service import GenerationService

router = APIRouter(prefix="/api", tags=["generation"])
logger = logging.getLogger(__name__)

# Tells clients to refetch their quota display after any generation attempt
QUOTA_REFRESH_HEADERS = {"X-Quota-Refresh": "true"}
GENERATION_PATHS = frozenset({"/api/music", "/api/video"})


def quota_refresh_headers(path: str) -> dict[str, str]:
    """Headers app-level error handlers add to generation responses."""

    return dict(QUOTA_REFRESH_HEADERS) if path in GENERATION_PATHS else {}


def _prompt_preview(prompt: str | None) -> str:
    text = (prompt or "").strip().replace("\n", " ")
    return text[:120] + ("..." if len(text) > 120 else "")


async def _handle_generation(
    media_kind: MediaKind,
    body: GenerationRequestBody,
    response: Response,
    auth_context: AuthContext,
    service: GenerationService,
) -> GenerationResponse:
    endpoint = "/api/music" if media_kind is MediaKind.AUDIO else "/api/video"
    caller_id = auth_context.get("caller_id")

    logger.info(
        "POST %s received (caller_id=%s, prompt='%s')",
        endpoint,
        caller_id,
        _prompt_preview(body.prompt),
    )

    try:
        result = await service.generate(caller_id, body.prompt, media_kind)
    except ValidationError as exc:
        logger.warning("Validation error in %s: %s", endpoint, exc)
        raise HTTPException(
            status_code=400,
            detail=format_validation_error(exc),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc
    except QuotaExceededError as exc:
        logger.info("Quota exceeded in %s (caller_id=%s)", endpoint, caller_id)
        raise HTTPException(
            status_code=403,
            detail=format_quota_error(exc),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc
    except ProviderError as exc:
        logger.error("Provider error in %s: %s", endpoint, exc)
        raise HTTPException(
            status_code=500,
            detail=format_provider_error(exc, media_label=media_kind.value),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc
    except ConfigurationError as exc:
        logger.error("Configuration error in %s: %s", endpoint, exc)
        raise HTTPException(
            status_code=500,
            detail=format_configuration_error(exc),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc
    except (DatabaseError, ServiceError) as exc:
        logger.error("Service error in %s: %s", endpoint, exc, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=format_service_error(exc),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc
    except Exception as exc:
        logger.error("Unexpected error in %s: %s", endpoint, exc, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=format_service_error(exc, message=f"Failed to generate {media_kind.value}"),
            headers=QUOTA_REFRESH_HEADERS,
        ) from exc

    response.headers.update(QUOTA_REFRESH_HEADERS)
    return GenerationResponse(url=result.asset_url, media_kind=result.media_kind.value)


@router.post("/music", response_model=GenerationResponse)
async def generate_music(
    body: GenerationRequestBody,
    response: Response,
    auth_context: AuthContext = Depends(require_auth_context),
    service: GenerationService = Depends(get_generation_service),
) -> GenerationResponse:
    """Generate an audio clip from a text prompt."""

    return await _handle_generation(MediaKind.AUDIO, body, response, auth_context, service)


@router.post("/video", response_model=GenerationResponse)
async def generate_video(
    body: GenerationRequestBody,
    response: Response,
    auth_context: AuthContext = Depends(require_auth_context),
    service: GenerationService = Depends(get_generation_service),
) -> GenerationResponse:
    """Generate a short video from a text prompt."""

    return await _handle_generation(MediaKind.VIDEO, body, response, auth_context, service)


__all__ = ["GENERATION_PATHS", "QUOTA_REFRESH_HEADERS", "quota_refresh_headers", "router"]
