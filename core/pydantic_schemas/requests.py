"""Inbound request payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class GenerationRequestBody(BaseModel):
    """Body of ``POST /api/music`` and ``POST /api/video``.

    ``prompt`` is optional at the schema level so a missing prompt reaches the
    service and is reported as a 400 rather than a schema error.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: Optional[str] = None


__all__ = ["GenerationRequestBody"]
