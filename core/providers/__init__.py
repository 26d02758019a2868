"""Provider Registry - Import-Time Registration of Generation Providers
Importing this package registers every provider implementation so that
``get_generation_provider`` can resolve them by name.

Usage Example:
    from core.providers import get_generation_provider
    provider = get_generation_provider("replicate")
    output = await provider.run("luma/ray-flash-2-720p", {"prompt": "waves"})
"""

from core.providers.base import BaseGenerationProvider
from core.providers.generation.replicate import ReplicateGenerationProvider
from core.providers.registries import register_generation_provider
from core.providers.resolvers import get_generation_provider

register_generation_provider("replicate", ReplicateGenerationProvider)

__all__ = [
    "BaseGenerationProvider",
    "ReplicateGenerationProvider",
    "get_generation_provider",
    "register_generation_provider",
]
