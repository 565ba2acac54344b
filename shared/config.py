"""
Shared configuration management for the Game Platform Gateway.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    app_env: str = Field(default="production")
    log_level: str = Field(default="info")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Security
    api_key: Optional[str] = Field(default=None)

    # Rate limiting
    rate_limit_window_ms: int = Field(default=60000, gt=0)
    rate_limit_max_requests: int = Field(default=100, gt=0)
    trust_proxy: bool = Field(default=False)

    # Response cache
    cache_max_entries: int = Field(default=10000, gt=0)

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str = "platform"


def get_config(service_name: str, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, **overrides)
