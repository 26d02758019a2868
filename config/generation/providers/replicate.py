"""Replicate prediction API configuration."""

from __future__ import annotations

import os

API_BASE_URL = os.getenv("REPLICATE_API_BASE_URL", "https://api.replicate.com/v1")

# Seconds the create call may hold the connection open (``Prefer: wait``)
SYNC_WAIT_SECONDS = int(os.getenv("REPLICATE_SYNC_WAIT_SECONDS", "60"))

# Polling settings for predictions still running after the initial wait
POLL_INTERVAL = float(os.getenv("REPLICATE_POLL_INTERVAL", "2.0"))
REQUEST_TIMEOUT = float(os.getenv("REPLICATE_REQUEST_TIMEOUT", "90.0"))

__all__ = [
    "API_BASE_URL",
    "SYNC_WAIT_SECONDS",
    "POLL_INTERVAL",
    "REQUEST_TIMEOUT",
]
