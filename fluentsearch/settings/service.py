"""
Settings Service
================
Process-wide access to the active SearchSettings.
"""

import logging
from typing import Optional

from .schemas import SearchSettings

logger = logging.getLogger(__name__)

# Global settings instance
_settings: Optional[SearchSettings] = None


def get_settings() -> SearchSettings:
    """Get or create the global settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = SearchSettings.from_env()
        logger.debug(f"Loaded settings from environment: {_settings.model_dump()}")
    return _settings


def configure(**overrides) -> SearchSettings:
    """
    Replace the global settings.

    Values not given keep their current setting. Overrides are validated,
    so an invalid value raises pydantic.ValidationError and leaves the
    current settings in place.
    """
    global _settings
    current = get_settings().model_dump()
    current.update(overrides)
    _settings = SearchSettings(**current)
    logger.info(f"Search settings updated: {', '.join(sorted(overrides))}")
    return _settings


def reset_settings() -> None:
    """Forget the global settings; the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


def resolve_settings(settings: Optional[SearchSettings]) -> SearchSettings:
    """Explicit settings win over the global instance."""
    return settings if settings is not None else get_settings()
