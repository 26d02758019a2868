"""Unit tests for the custom exception hierarchy and error payloads."""

from config.billing.defaults import UPGRADE_MESSAGE
from core.exceptions import (
    ConfigurationError,
    DatabaseError,
    EmptyProviderResponseError,
    GenerationErrorKind,
    MalformedAssetUrlError,
    ProviderError,
    ProviderUnavailableError,
    QuotaExceededError,
    ServiceError,
    ValidationError,
)
from core.http.errors import (
    format_provider_error,
    format_quota_error,
    format_validation_error,
)


def test_validation_error():
    """ValidationError should capture message and field."""

    error = ValidationError("Prompt is required", field="prompt")
    assert error.message == "Prompt is required"
    assert error.field == "prompt"
    assert error.kind is GenerationErrorKind.BAD_REQUEST
    assert isinstance(error, ServiceError)


def test_quota_error_default_message():
    error = QuotaExceededError(caller_id=7)

    assert str(error) == "Free trial has expired. Please upgrade to pro."
    assert error.caller_id == 7
    assert error.kind is GenerationErrorKind.QUOTA_EXCEEDED


def test_provider_error():
    """ProviderError should retain provider and original exception."""

    original = ValueError("API failed")
    error = ProviderUnavailableError("Replicate error", provider="replicate", original_error=original)

    assert error.message == "Replicate error"
    assert error.provider == "replicate"
    assert error.original_error is original
    assert error.kind is GenerationErrorKind.PROVIDER_UNAVAILABLE
    assert isinstance(error, ProviderError)


def test_normalization_errors_are_provider_errors():
    empty = EmptyProviderResponseError("nothing", raw_output=[])
    malformed = MalformedAssetUrlError("bad", value="ftp://x")

    assert isinstance(empty, ProviderError)
    assert isinstance(malformed, ProviderError)
    assert empty.kind is GenerationErrorKind.EMPTY_PROVIDER_RESPONSE
    assert malformed.kind is GenerationErrorKind.MALFORMED_ASSET_URL
    assert empty.raw_output == []
    assert malformed.value == "ftp://x"


def test_database_error():
    """DatabaseError should include the failing operation."""

    error = DatabaseError("Save failed", operation="session")
    assert error.operation == "session"


def test_configuration_error_required_key():
    """ConfigurationError should store the missing key."""

    error = ConfigurationError("Missing key", key="REPLICATE_API_TOKEN")
    assert error.key == "REPLICATE_API_TOKEN"


def test_format_validation_error_includes_field():
    payload = format_validation_error(ValidationError("Prompt is required", field="prompt"))

    assert payload == {
        "error": "bad_request",
        "message": "Prompt is required",
        "context": {"field": "prompt"},
    }


def test_format_quota_error_flags_upgrade():
    payload = format_quota_error(QuotaExceededError())

    assert payload["error"] == "quota_exceeded"
    assert payload["message"] == UPGRADE_MESSAGE
    assert payload["context"] == {"upgrade_required": True}


def test_format_provider_error_hides_raw_output():
    error = EmptyProviderResponseError("no url", provider="replicate", raw_output={"secret": "x"})

    payload = format_provider_error(error, media_label="audio")

    assert payload["message"] == "Failed to generate audio URL"
    assert payload["error"] == "empty_provider_response"
    assert payload["context"] == {"provider": "replicate"}
    assert "secret" not in str(payload)


def test_format_provider_error_hides_unavailable_detail():
    error = ProviderUnavailableError(
        "Replicate prediction failed: CUDA out of memory on node gpu-17",
        provider="replicate",
    )

    payload = format_provider_error(error, media_label="video")

    assert payload == {
        "error": "provider_unavailable",
        "message": "Failed to generate video",
        "context": {"provider": "replicate"},
    }
    assert "CUDA" not in str(payload)
