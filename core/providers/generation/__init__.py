"""Hosted media generation providers."""

from .replicate import ReplicateGenerationProvider

__all__ = ["ReplicateGenerationProvider"]
