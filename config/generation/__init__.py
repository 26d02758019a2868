"""Generation configuration exports."""

from . import defaults, models, providers
from .defaults import *  # noqa: F401,F403
from .models import *  # noqa: F401,F403

__all__ = [
    *defaults.__all__,
    *models.__all__,
    "providers",
]
