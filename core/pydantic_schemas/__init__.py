"""Public pydantic schema exports for FastAPI interfaces."""

from .api_envelope import ErrorEnvelope, error
from .requests import GenerationRequestBody
from .responses import GenerationResponse, UsageResponse

__all__ = [
    "ErrorEnvelope",
    "error",
    "GenerationRequestBody",
    "GenerationResponse",
    "UsageResponse",
]
