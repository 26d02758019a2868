"""Request logging middleware and safe previews of opaque payloads.

Provider outputs are untyped, so anything logged from them goes through
:func:`render_payload_preview`: secrets are masked, objects fall back to their
``repr`` and the result is capped at a few kilobytes.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping

from fastapi import FastAPI, Request

PREVIEW_LIMIT = 4096
_SKIP_PATHS = frozenset({"/health"})
_SECRET_KEYS = frozenset(
    {
        "access_token",
        "api_key",
        "apikey",
        "auth_token",
        "authorization",
        "cookie",
        "password",
        "secret",
        "token",
    }
)
_VISIBLE_SECRET_CHARS = 12
_MAX_DEPTH = 8


def _mask(value: Any) -> str:
    text = str(value) if value else ""
    if len(text) <= _VISIBLE_SECRET_CHARS:
        return "***"
    return text[:_VISIBLE_SECRET_CHARS] + "***"


def _scrub(value: Any, depth: int = _MAX_DEPTH) -> Any:
    if depth <= 0:
        return "<max depth reached>"
    if isinstance(value, Mapping):
        return {
            key: _mask(item) if str(key).lower() in _SECRET_KEYS else _scrub(item, depth - 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_scrub(item, depth - 1) for item in value]
    return value


def _clip(raw: bytes) -> str:
    if not raw:
        return "<empty>"
    try:
        text = raw[:PREVIEW_LIMIT].decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary {len(raw)} bytes>"
    text = " ".join(text.split())
    return f"{text}... ({len(raw)} bytes)" if len(raw) > PREVIEW_LIMIT else text


def render_payload_preview(payload: Any) -> str:
    """Return a masked, length-limited rendering of ``payload`` for logs."""

    if payload is None:
        return "<none>"
    if isinstance(payload, (bytes, bytearray)):
        return _clip(bytes(payload))
    if isinstance(payload, str):
        return _clip(payload.encode("utf-8", errors="ignore"))

    try:
        text = json.dumps(_scrub(payload), default=repr, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        text = repr(payload)
    return _clip(text.encode("utf-8", errors="ignore"))


def register_http_request_logging(app: FastAPI, *, logger_name: str = "core.http") -> None:
    """Log each request on arrival and again with its status and duration."""

    if getattr(app.state, "request_logging_installed", False):
        return

    logger = logging.getLogger(logger_name)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):  # type: ignore[override]
        path = request.url.path
        if path in _SKIP_PATHS:
            return await call_next(request)

        client = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        logger.info("HTTP %s %s from %s", request.method, path, client)
        if logger.isEnabledFor(logging.DEBUG):
            body = await request.body()
            if body:
                try:
                    preview: Any = json.loads(body)
                except ValueError:
                    preview = body
                logger.debug("HTTP %s %s body %s", request.method, path, render_payload_preview(preview))

        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "HTTP %s %s -> %s (%sms)",
            request.method,
            path,
            response.status_code,
            int((time.perf_counter() - started) * 1000),
        )
        return response

    app.state.request_logging_installed = True


__all__ = ["PREVIEW_LIMIT", "register_http_request_logging", "render_payload_preview"]
