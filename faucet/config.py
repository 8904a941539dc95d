"""Configuration loading for the faucet.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from faucet.core.models import DEFAULT_WITHDRAW_CAP, WEI_PER_UNIT


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Value store configuration
    withdraw_cap: int = Field(
        default=DEFAULT_WITHDRAW_CAP,
        description="Maximum base units a single withdraw may request",
    )
    deploy_value: int = Field(
        default=0,
        description="Base units attached when the store is deployed",
    )

    # Sandbox configuration
    sandbox_account_count: int = Field(
        default=20,
        description="Number of funded identities in the sandbox",
    )
    sandbox_initial_balance: int = Field(
        default=10_000 * WEI_PER_UNIT,
        description="Base units credited to each sandbox identity",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Run mode
    run_mode: Literal["cli", "demo"] = Field(
        default="cli",
        description="Run mode",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("withdraw_cap", "deploy_value", "sandbox_initial_balance")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Ensure amounts are non-negative."""
        if v < 0:
            raise ValueError("amounts must be non-negative")
        return v

    @field_validator("sandbox_account_count")
    @classmethod
    def validate_account_count(cls, v: int) -> int:
        """Ensure the sandbox has room for an owner and a second identity."""
        if v < 2:
            raise ValueError("sandbox_account_count must be at least 2")
        return v


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
