"""Logging configuration for the media generation backend.

Console output always; inside the container (``NODE_ENV`` set) a daily rotated
file under ``BACKEND_LOG_DIR`` as well. Uvicorn's own loggers are silenced
because ``core.observability`` logs every request itself.
"""
from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, List

from core.utils.env import get_env

_PROJECT_ROOT = str(Path(__file__).resolve().parents[1]) + "/"
_TRUTHY = {"1", "true", "yes", "on"}

# Third-party loggers that only matter at WARNING and above
_QUIET_LOGGERS = (
    "httpcore",
    "httpx",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "aiosqlite",
    "asyncpg",
    "aiomysql",
    "multipart",
    "h11",
)

_configured = False


class _HealthCheckFilter(logging.Filter):
    """Drop access log lines for the container health probe."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        return "GET /health" not in record.getMessage()


def _level(name: str, default: str) -> str:
    value = (get_env(name) or "").strip().upper()
    return value if value and isinstance(getattr(logging, value, None), int) else default


def _install_short_paths() -> None:
    """Expose ``%(shortpathname)s``: the record path relative to the project root."""

    previous = logging.getLogRecordFactory()
    if getattr(previous, "_short_paths", False):
        return

    def factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
        record = previous(*args, **kwargs)
        pathname = record.pathname or ""
        for prefix in (_PROJECT_ROOT, "/app/"):
            if pathname.startswith(prefix):
                pathname = pathname[len(prefix):]
                break
        record.shortpathname = pathname
        return record

    factory._short_paths = True  # type: ignore[attr-defined]
    logging.setLogRecordFactory(factory)


def _format() -> str:
    stamp = "%(asctime)s"
    if (get_env("BACKEND_LOG_TIME_MS", default="false") or "").lower() in _TRUTHY:
        stamp += ".%(msecs)03d"
    return stamp + " %(levelname)s [%(shortpathname)s:%(lineno)d] - %(message)s"


def build_logging_config() -> Dict[str, Any]:
    """Return the ``dictConfig`` mapping for the current environment."""

    root_level = _level("BACKEND_LOG_LEVEL", "INFO")
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": _level("BACKEND_LOG_CONSOLE_LEVEL", root_level),
            "formatter": "standard",
            "stream": "ext://sys.stdout",
        },
    }

    if get_env("NODE_ENV"):
        log_dir = Path(get_env("BACKEND_LOG_DIR") or "/storage/logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": _level("BACKEND_LOG_FILE_LEVEL", root_level),
            "formatter": "standard",
            "filename": str(log_dir / (get_env("BACKEND_LOG_FILE") or "media-backend.log")),
            "when": "midnight",
            "backupCount": int(get_env("BACKEND_LOG_RETENTION") or "7"),
            "encoding": "utf-8",
        }

    names: List[str] = list(handlers)
    uvicorn_logger = {"level": "CRITICAL", "handlers": names, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": _format(), "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "root": {"level": root_level, "handlers": names},
        "loggers": {
            "uvicorn": dict(uvicorn_logger),
            "uvicorn.error": dict(uvicorn_logger),
            "uvicorn.access": {
                "level": _level("BACKEND_ACCESS_LOG_LEVEL", "CRITICAL"),
                "handlers": ["console"],
                "propagate": False,
            },
            **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        },
    }


def setup_logging(force: bool = False) -> None:
    """Configure root and application loggers once per process."""

    global _configured
    if _configured and not force:
        return

    _install_short_paths()
    logging.config.dictConfig(build_logging_config())
    logging.captureWarnings(True)
    logging.getLogger("uvicorn.access").addFilter(_HealthCheckFilter())

    _configured = True


__all__ = ["build_logging_config", "setup_logging"]
