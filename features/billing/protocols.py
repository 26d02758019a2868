"""Collaborator interfaces consumed by the generation request handler.

Both collaborators own their storage and their own concurrency control; the
request handler only calls these methods.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UsageLedger(Protocol):
    """Per-caller free-tier counter."""

    async def check_remaining(self, caller_id: int) -> bool:
        """Return True while the caller still has free-tier allowance."""

    async def increment(self, caller_id: int) -> None:
        """Record one billable generation for the caller."""


@runtime_checkable
class EntitlementStore(Protocol):
    """Read-only view of paid plan status."""

    async def is_active(self, caller_id: int) -> bool:
        """Return True when the caller holds an active paid subscription."""


__all__ = ["EntitlementStore", "UsageLedger"]
