"""Model identifiers and fixed input parameters per media kind."""

from __future__ import annotations

import os
from typing import Any, Dict

MUSIC_MODEL = os.getenv(
    "MUSIC_MODEL",
    "ardianfe/music-gen-fn-200e:96af46316252ddea4c6614e31861876183b59dce84bad765f38424e87919dd85",
)

MUSIC_PARAMETERS: Dict[str, Any] = {
    "top_k": 250,
    "top_p": 0,
    "duration": 20,
    "temperature": 1,
    "continuation": False,
    "output_format": "wav",
    "continuation_start": 0,
    "multi_band_diffusion": False,
    "normalization_strategy": "loudness",
    "classifier_free_guidance": 3,
}

VIDEO_MODEL = os.getenv("VIDEO_MODEL", "luma/ray-flash-2-720p")
VIDEO_PARAMETERS: Dict[str, Any] = {}

VIDEO_FALLBACK_MODEL = os.getenv(
    "VIDEO_FALLBACK_MODEL",
    "anotherjesse/zeroscope-v2-xl:71996d331e8ede8ef7bd76eba9fae076d31792e4ddf4ad057779b443d6aea62f",
)
VIDEO_FALLBACK_PARAMETERS: Dict[str, Any] = {}

__all__ = [
    "MUSIC_MODEL",
    "MUSIC_PARAMETERS",
    "VIDEO_MODEL",
    "VIDEO_PARAMETERS",
    "VIDEO_FALLBACK_MODEL",
    "VIDEO_FALLBACK_PARAMETERS",
]
