"""
Registry Configuration Management

Settings for the module registry and its tooling, read from environment
variables (REGISTRY_ prefix) or a .env file.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ('CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG')


class RegistrySettings(BaseSettings):
    """
    Module registry configuration with validation and environment variable support.
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Logging level for registry tooling")
    health_check_interval: float = Field(60.0, description="Seconds between periodic health sweeps")
    app_env: str = Field("development", description="Deployment environment name")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Log level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator('health_check_interval')
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError('Health check interval must be positive')
        return v

    @classmethod
    def from_env_file(cls, env_file_path: Optional[Path] = None) -> "RegistrySettings":
        """
        Create settings from an environment file, falling back to plain
        environment variables when the file does not exist.
        """
        if env_file_path is not None and env_file_path.exists():
            return cls(_env_file=str(env_file_path))
        return cls()


# Global settings instance
_settings: Optional[RegistrySettings] = None


def get_registry_settings(env_file_path: Optional[Path] = None) -> RegistrySettings:
    """Get or create the global registry settings instance."""
    global _settings
    if _settings is None:
        _settings = RegistrySettings.from_env_file(env_file_path)
    return _settings


def reset_registry_settings() -> None:
    """Reset the global settings (useful for testing)."""
    global _settings
    _settings = None
