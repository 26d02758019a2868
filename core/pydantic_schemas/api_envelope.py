"""Envelope for every error body the service returns.

Successful generation responses are plain models (see ``responses.py``);
failures of any kind are wrapped here so clients can always read ``message``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ErrorEnvelope(BaseModel):
    code: int = Field(..., description="HTTP status code of the failure")
    success: bool = Field(False, description="Always false for error bodies")
    message: str = Field(..., description="Human readable text shown to the end user")
    data: Optional[Dict[str, Any]] = Field(None, description="Error kind and safe context")

    @field_validator("code")
    @classmethod
    def _must_be_error_status(cls, value: int) -> int:
        if value < 400:
            raise ValueError("Error responses must use an error HTTP status code (>= 400)")
        return value


def error(code: int, message: str, data: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Return the serialisable error envelope for ``code``."""

    return ErrorEnvelope(code=code, message=message, data=data).model_dump()


__all__ = ["ErrorEnvelope", "error"]
