"""Value types for one generation request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class MediaKind(str, Enum):
    """Kind of asset a generation produces."""

    AUDIO = "audio"
    VIDEO = "video"


@dataclass(frozen=True)
class GenerationRequest:
    """A validated prompt plus the fixed model parameters for its media kind."""

    caller_id: int
    prompt: str
    media_kind: MediaKind
    model_parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationResult:
    """The only durable output of a request: where the asset lives."""

    asset_url: str
    media_kind: MediaKind


__all__ = ["GenerationRequest", "GenerationResult", "MediaKind"]
