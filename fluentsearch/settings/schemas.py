"""
Settings Schemas
================
Pydantic models for FluentSearch configuration.
"""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


ENV_PREFIX = "FLUENTSEARCH_"


class LevenshteinBackend(str, Enum):
    """Implementations of the edit-distance scorer."""
    BUILTIN = "builtin"        # Dynamic-programming table in fluentsearch.levenshtein
    RAPIDFUZZ = "rapidfuzz"    # rapidfuzz.distance.Levenshtein, same unit costs


class SearchSettings(BaseModel):
    """Runtime options shared by chains and record sources."""
    fetch_batch_size: int = Field(
        1000, ge=1, description="Rows fetched per round trip from SQL backends"
    )
    levenshtein_backend: LevenshteinBackend = Field(
        LevenshteinBackend.BUILTIN, description="Edit-distance implementation used in Python"
    )
    log_sql: bool = Field(False, description="Log generated SQL at INFO level")

    model_config = {"frozen": True}

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "SearchSettings":
        """
        Build settings from FLUENTSEARCH_* environment variables.

        Unset variables fall back to the field defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}

        batch_size = environ.get(f"{ENV_PREFIX}FETCH_BATCH_SIZE")
        if batch_size:
            values["fetch_batch_size"] = batch_size.strip()

        backend = environ.get(f"{ENV_PREFIX}LEVENSHTEIN_BACKEND")
        if backend:
            values["levenshtein_backend"] = backend.strip().lower()

        log_sql = environ.get(f"{ENV_PREFIX}LOG_SQL")
        if log_sql:
            values["log_sql"] = log_sql.strip().lower() in ("1", "true", "yes", "on")

        return cls(**values)
