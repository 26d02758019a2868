"""Generation flow defaults."""

from __future__ import annotations

import os

DEFAULT_PROVIDER = os.getenv("GENERATION_PROVIDER", "replicate")

# Upper bound for one provider call, including the provider's own polling
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "300"))

__all__ = [
    "DEFAULT_PROVIDER",
    "GENERATION_TIMEOUT_SECONDS",
]
