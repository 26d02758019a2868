from __future__ import annotations

"""Media Generation Backend - Main Application Entry Point
FastAPI application factory for the prompt-to-media gateway.
Architecture Overview:
    - Feature-based modular architecture (see features/ directory)
    - Provider registry pattern for resolving the hosted model provider
    - Free tier usage ledger and subscription entitlements in one SQL database
Entry Points:
    - /health - Health check endpoint
    - /api/music, /api/video - Prompt to asset URL generation
    - /api/usage - Quota display state for the current caller
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.auth import AuthenticationError
from core.config import APP_VERSION, settings
from core.exceptions import ConfigurationError, DatabaseError
from core.logging import setup_logging
from core.observability import register_http_request_logging
from core.pydantic_schemas import error as api_error
from core.utils.env import is_production
from features.billing.routes import router as billing_router
from features.generation.routes import quota_refresh_headers
from features.generation.routes import router as generation_router
from infrastructure.db import dispose_main_engine, prepare_database, require_main_engine

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan - startup and shutdown events."""
    # Startup
    if settings.create_tables:
        logger.info("Creating database tables")
        await prepare_database(require_main_engine())
    yield
    # Shutdown
    logger.info("Application shutting down...")
    await dispose_main_engine()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Application factory returning a configured FastAPI instance."""

    app = FastAPI(
        title="Media Generation Backend",
        description="Prompt to audio and video asset URLs through hosted models",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    if is_production():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Quota-Refresh"],
        )
    else:
        # Any localhost port in dev
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"^http://(localhost|127\.0\.0\.1)(:\d+)?$",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Quota-Refresh"],
        )

    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        """Return a structured 401 envelope for authentication failures."""

        payload = api_error(
            code=exc.code,
            message=exc.message,
            data={"reason": exc.reason} if exc.reason else None,
        )
        return JSONResponse(
            status_code=exc.code,
            content=payload,
            headers={"WWW-Authenticate": "Bearer", **quota_refresh_headers(request.url.path)},
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Wrap route errors in the API envelope, keeping their headers."""

        detail = exc.detail
        if isinstance(detail, dict):
            message = str(detail.get("message") or detail.get("error") or "Request failed")
            data = detail
        else:
            message = str(detail)
            data = None
        return JSONResponse(
            status_code=exc.status_code,
            content=api_error(code=exc.status_code, message=message, data=data),
            headers={**quota_refresh_headers(request.url.path), **(exc.headers or {})},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 bad requests."""

        payload = api_error(
            code=status.HTTP_400_BAD_REQUEST,
            message="Invalid request body",
            data={"error": "bad_request", "errors": jsonable_errors(exc)},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=payload,
            headers=quota_refresh_headers(request.url.path),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        """Return a structured API envelope for configuration errors."""

        logger.error("Configuration error: %s", exc)
        payload = api_error(
            code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=str(exc),
            data={"key": exc.key} if getattr(exc, "key", None) else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=payload,
            headers=quota_refresh_headers(request.url.path),
        )

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError):
        """Return a structured API envelope for database failures."""

        logger.error("Database error during %s: %s", exc.operation, exc)
        payload = api_error(
            code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Internal error",
            data={"operation": exc.operation} if exc.operation else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=payload,
            headers=quota_refresh_headers(request.url.path),
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "version": APP_VERSION}

    register_http_request_logging(app)

    app.include_router(generation_router)
    app.include_router(billing_router)

    logger.info("FastAPI application configured with generation and billing routers")
    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
