"""Custom Exception Hierarchy for the Media Generation Backend
This module defines a typed exception hierarchy that enables precise error
handling and structured error responses across the application.

Exception Handling Flow:
    1. Service layer raises typed exception
    2. Route or FastAPI exception handler catches it (see main.py)
    3. Handler converts to structured JSON response
    4. Client receives error envelope with code, message, and context
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from config.billing.defaults import UPGRADE_MESSAGE


class GenerationErrorKind(str, Enum):
    """Every failure category a generation request can end with."""

    UNAUTHORIZED = "unauthorized"
    BAD_REQUEST = "bad_request"
    QUOTA_EXCEEDED = "quota_exceeded"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    EMPTY_PROVIDER_RESPONSE = "empty_provider_response"
    MALFORMED_ASSET_URL = "malformed_asset_url"
    # Client-side only, see features/generation/presentation.py
    ASSET_PLAYBACK_FAILURE = "asset_playback_failure"


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    kind = GenerationErrorKind.BAD_REQUEST

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class QuotaExceededError(ServiceError):
    """Raised when the free tier is exhausted and no paid entitlement is active."""

    kind = GenerationErrorKind.QUOTA_EXCEEDED

    def __init__(
        self,
        message: str = UPGRADE_MESSAGE,
        caller_id: int | None = None,
    ):
        self.message = message
        self.caller_id = caller_id
        super().__init__(self.message)


class ProviderError(ServiceError):
    """Raised when an external provider (AI API) fails."""

    kind = GenerationErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, message: str, provider: str | None = None, original_error: Exception | None = None):
        self.message = message
        self.provider = provider
        self.original_error = original_error
        super().__init__(self.message)


class ProviderUnavailableError(ProviderError):
    """Raised on network, HTTP, timeout, or provider-side job failures."""


class EmptyProviderResponseError(ProviderError):
    """Raised when the provider answered but no asset URL could be extracted."""

    kind = GenerationErrorKind.EMPTY_PROVIDER_RESPONSE

    def __init__(self, message: str, provider: str | None = None, raw_output: Any = None):
        super().__init__(message, provider=provider)
        self.raw_output = raw_output


class MalformedAssetUrlError(ProviderError):
    """Raised when the extracted asset value is not an http(s) URL."""

    kind = GenerationErrorKind.MALFORMED_ASSET_URL

    def __init__(self, message: str, provider: str | None = None, value: Any = None):
        super().__init__(message, provider=provider)
        self.value = value


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class DatabaseError(ServiceError):
    """Raised when database operations fail."""

    def __init__(self, message: str, operation: str | None = None):
        self.message = message
        self.operation = operation
        super().__init__(self.message)
