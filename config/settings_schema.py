"""
Typed Settings Schema (Pydantic)
================================

Provides typed, validated configuration for the evolution engine.

Usage:
    from config.settings_schema import load_validated_settings

    settings = load_validated_settings()
    f_scale = settings.de.f_scale
    cache_path = settings.cache.path
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config.settings_loader import load_settings
from core.exceptions import SettingsValidationError

logger = logging.getLogger(__name__)


# ============================================================================
# Schema Definitions
# ============================================================================

class DESettings(BaseModel):
    """Differential-evolution operator parameters."""
    strategy: Literal["rand", "best"] = Field(
        default="rand",
        description="Base vector choice for mutation"
    )
    difference_vector_count: int = Field(
        default=1, ge=0,
        description="Number of difference pairs added to the base vector"
    )
    f_scale: float = Field(default=0.5, ge=0, description="Difference scale F")
    crossover_rate: float = Field(
        default=0.5, ge=0, lt=1.0,
        description="Binomial crossover rate CR"
    )


class PopulationSettings(BaseModel):
    """Population shape and reproducibility."""
    size: int = Field(default=20, ge=2)
    seed: int = Field(default=0, ge=0)
    epochs: int = Field(default=100, ge=0)


class CacheSettings(BaseModel):
    """Evaluation memoization configuration."""
    enabled: bool = True
    path: Optional[str] = Field(
        default=None,
        description="Persistent cache file; in-memory only when unset"
    )
    allow_missing: bool = Field(
        default=True,
        description="Treat a missing cache file as an empty cache"
    )


class LoggingSettings(BaseModel):
    """Run event logging."""
    events_enabled: bool = False


class Settings(BaseModel):
    """Complete settings schema."""
    model_config = ConfigDict(extra="allow")

    de: DESettings = Field(default_factory=DESettings)
    population: PopulationSettings = Field(default_factory=PopulationSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# ============================================================================
# Validation Functions
# ============================================================================

def _load_yaml_config() -> Dict[str, Any]:
    """Re-read the raw YAML mapping through the settings loader."""
    return dict(load_settings(force_reload=True))


def validate_settings(raw: Dict[str, Any]) -> Settings:
    """
    Validate a raw settings mapping.

    Raises:
        SettingsValidationError: If the mapping does not match the schema
    """
    try:
        return Settings(**raw)
    except ValidationError as e:
        logger.error(f"Settings validation failed: {e}")
        raise SettingsValidationError(
            "Settings validation failed",
            context={"errors": len(e.errors())},
            cause=e,
        ) from e


def load_validated_settings() -> Settings:
    """
    Load and validate settings from base.yaml.

    Returns:
        Validated Settings object

    Raises:
        SettingsValidationError: If settings are invalid
    """
    return validate_settings(_load_yaml_config())
