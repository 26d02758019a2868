"""Observability helpers for request and provider payload logging."""

from .request_logging import (
    register_http_request_logging,
    render_payload_preview,
)

__all__ = [
    "register_http_request_logging",
    "render_payload_preview",
]
