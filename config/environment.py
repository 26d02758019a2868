"""Runtime environment label derived from ``NODE_ENV``."""

from __future__ import annotations

import os
from typing import Literal

Environment = Literal["development", "production", "test"]

# Labels used by deploy scripts mapped onto the three environments
_ALIASES = {
    "local": "development",
    "dev": "development",
    "prod": "production",
    "testing": "test",
}


def get_environment() -> Environment:
    raw = os.getenv("NODE_ENV", "development").strip().lower()
    label = _ALIASES.get(raw, raw)
    if label in ("production", "test"):
        return label  # type: ignore[return-value]
    return "development"


ENVIRONMENT: Environment = get_environment()
IS_DEVELOPMENT = ENVIRONMENT == "development"
IS_PRODUCTION = ENVIRONMENT == "production"
IS_TEST = ENVIRONMENT == "test"

__all__ = [
    "Environment",
    "ENVIRONMENT",
    "IS_DEVELOPMENT",
    "IS_PRODUCTION",
    "IS_TEST",
    "get_environment",
]
