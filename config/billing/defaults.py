"""Free tier and subscription defaults."""

from __future__ import annotations

import os

# Number of free generations a caller may consume without a subscription
FREE_TIER_LIMIT = int(os.getenv("FREE_TIER_LIMIT", "5"))

# A subscription stays active this long after its billing period ends
SUBSCRIPTION_GRACE_SECONDS = int(os.getenv("SUBSCRIPTION_GRACE_SECONDS", "86400"))

UPGRADE_MESSAGE = "Free trial has expired. Please upgrade to pro."

__all__ = [
    "FREE_TIER_LIMIT",
    "SUBSCRIPTION_GRACE_SECONDS",
    "UPGRADE_MESSAGE",
]
