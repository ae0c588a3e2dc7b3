"""
Terrain Weathering - Runtime Settings
Environment-driven settings for the demo entry point and synthetic datasets.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix WEATHERING_)."""

    # Logging
    log_level: str = "INFO"

    # Dataset queries
    default_radius_km: float = 10.0

    # Synthetic dataset provider
    synthetic_grid_size: int = 50
    synthetic_seed: int = 42
    synthetic_noise_m: float = 10.0

    class Config:
        env_prefix = "WEATHERING_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
