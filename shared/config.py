"""
Shared configuration management for the Cedar policy boundary.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CEDAR_BOUNDARY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Observability
    enable_metrics: bool = Field(default=True)


class BoundaryConfig(BaseConfig):
    """Policy boundary configuration."""

    # Policy engine
    engine: str = Field(default="cedarpy", description="Name of the policy engine adapter")
    cedar_version: Optional[str] = Field(
        default=None,
        description="Overrides the version identity reported by the engine"
    )


def get_config(**overrides) -> BoundaryConfig:
    """Get boundary configuration from the environment."""
    return BoundaryConfig(**overrides)
