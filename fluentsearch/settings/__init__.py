# FluentSearch Settings Module
"""
Centralized configuration for FluentSearch.
Settings are validated with pydantic and can be loaded from the environment.
"""

from .schemas import (
    ENV_PREFIX,
    LevenshteinBackend,
    SearchSettings,
)
from .service import (
    configure,
    get_settings,
    reset_settings,
    resolve_settings,
)

__all__ = [
    "ENV_PREFIX",
    "LevenshteinBackend",
    "SearchSettings",
    "configure",
    "get_settings",
    "reset_settings",
    "resolve_settings",
]
