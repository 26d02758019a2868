"""Outbound response payloads."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GenerationResponse(BaseModel):
    """Successful generation: the asset URL the client should play."""

    url: str
    media_kind: str


class UsageResponse(BaseModel):
    """Quota display state for the dashboard."""

    count: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    remaining: int = Field(..., ge=0)
    is_pro: bool


__all__ = ["GenerationResponse", "UsageResponse"]
