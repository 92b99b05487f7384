"""
Configuration management for smelter_recon.

Uses pydantic-settings for type-safe configuration with automatic
environment variable loading and validation. Every value has a default, so
the engine runs without any environment at all.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from smelter_recon.constants import (
    DEFAULT_FUZZY_ACCEPT_THRESHOLD,
    DEFAULT_FUZZY_CLASSIFY_THRESHOLD,
    DEFAULT_ID_WEIGHT,
    DEFAULT_KEY_THRESHOLD,
    DEFAULT_MIN_MATCH_LENGTH,
    DEFAULT_NAME_WEIGHT,
    DEFAULT_WORKERS,
)


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Variables are prefixed with ``SMELTER_RECON_`` (for example
    ``SMELTER_RECON_FUZZY_ACCEPT_THRESHOLD=0.65``).
    """

    model_config = SettingsConfigDict(
        env_prefix="SMELTER_RECON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Fuzzy tier
    fuzzy_accept_threshold: float = Field(
        default=DEFAULT_FUZZY_ACCEPT_THRESHOLD,
        description="Minimum confidence for a fuzzy candidate to be accepted",
    )
    fuzzy_classify_threshold: float = Field(
        default=DEFAULT_FUZZY_CLASSIFY_THRESHOLD,
        description="Minimum fuzzy confidence to trust the matched assessment status",
    )
    name_weight: float = Field(
        default=DEFAULT_NAME_WEIGHT,
        description="Weight of the facility name key in fuzzy scoring",
    )
    id_weight: float = Field(
        default=DEFAULT_ID_WEIGHT,
        description="Weight of the facility id key in fuzzy scoring",
    )
    key_threshold: float = Field(
        default=DEFAULT_KEY_THRESHOLD,
        description="Minimum similarity for a single key to contribute to a score",
    )
    min_match_length: int = Field(
        default=DEFAULT_MIN_MATCH_LENGTH,
        description="Normalized queries shorter than this skip the fuzzy tier",
    )

    # Execution
    max_workers: int = Field(
        default=DEFAULT_WORKERS,
        description="Worker threads used to match one submission (1 = sequential)",
    )
    show_progress: bool = Field(
        default=False,
        description="Show a tqdm progress bar while matching",
    )

    @field_validator(
        "fuzzy_accept_threshold",
        "fuzzy_classify_threshold",
        "name_weight",
        "id_weight",
        "key_threshold",
    )
    @classmethod
    def check_unit_interval(cls, v: float) -> float:
        """Thresholds and weights are fractions."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"must be between 0 and 1, got {v}")
        return v

    @field_validator("min_match_length", "max_workers")
    @classmethod
    def check_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be at least 1, got {v}")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
