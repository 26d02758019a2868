"""Provider-specific generation configuration."""

from . import replicate

__all__ = ["replicate"]
