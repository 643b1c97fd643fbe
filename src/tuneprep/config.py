"""
Conversion settings and named profiles.

Settings resolve with precedence: explicit overrides > environment > profile.
Environment variables are read after loading a ``.env`` file if present.
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from .types import FormatType

logger = logging.getLogger(__name__)

ENV_PREFIX = "TUNEPREP_"

PROFILES: Dict[str, Dict[str, Any]] = {
    "default": {
        "chunk_size": 1000,
        "chunk_overlap": 200,
    },
    "long_context": {
        "chunk_size": 2000,
        "chunk_overlap": 200,
    },
    "fine_grained": {
        "chunk_size": 500,
        "chunk_overlap": 50,
    },
}

# setting name -> environment variable suffix
ENV_SETTINGS = {
    "chunk_size": "CHUNK_SIZE",
    "chunk_overlap": "CHUNK_OVERLAP",
    "format_type": "FORMAT",
    "system_instructions": "SYSTEM_INSTRUCTIONS",
    "min_records": "MIN_RECORDS",
}


class ConversionSettings(BaseModel):
    """Settings for converting documents into training records."""
    chunk_size: int = Field(1000, gt=0)
    chunk_overlap: int = Field(200, ge=0)
    format_type: FormatType = FormatType.KNOWLEDGE
    system_instructions: str = ""
    min_chunk_chars: int = Field(50, ge=0)
    min_records: int = Field(10, ge=0)
    validate_output: bool = True

    @model_validator(mode="after")
    def _check_overlap(self) -> "ConversionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than chunk_size ({self.chunk_size})"
            )
        return self


def _env_overrides() -> Dict[str, Any]:
    """Collect settings from TUNEPREP_* environment variables."""
    load_dotenv()

    overrides = {}
    for setting, suffix in ENV_SETTINGS.items():
        value = os.getenv(ENV_PREFIX + suffix)
        if value is not None and value != "":
            overrides[setting] = value
    if overrides:
        logger.debug("Settings from environment: %s", sorted(overrides))
    return overrides


def resolve_profile(profile: str) -> Dict[str, Any]:
    """
    Get the base configuration of a named profile.

    Raises:
        ValueError: If the profile is unknown
    """
    if profile not in PROFILES:
        raise ValueError(f"Unknown profile: {profile}. Must be one of {', '.join(PROFILES)}")
    return PROFILES[profile].copy()


def resolve_settings(
    profile: str = "default",
    overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True
) -> ConversionSettings:
    """
    Resolve conversion settings.

    Args:
        profile: Named profile providing the base values
        overrides: Explicit values; ``None`` entries are ignored
        use_env: Whether TUNEPREP_* environment variables apply

    Returns:
        Validated settings
    """
    config = resolve_profile(profile)

    if use_env:
        config.update(_env_overrides())

    if overrides:
        config.update({k: v for k, v in overrides.items() if v is not None})

    return ConversionSettings(**config)
