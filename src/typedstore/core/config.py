"""Configuration management for typedstore.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Unlike a typical application config,
the settings instance held by a store context is read at call time by every
collection operation, so flipping ``log_operations`` or ``validation_level``
on a live instance takes effect on the next call.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from typedstore.domain.entities.document import ValidationLevel


class Settings(BaseSettings):
    """Process-wide typedstore settings.

    Settings are loaded from environment variables (``TYPEDSTORE_`` prefix)
    and .env files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TYPEDSTORE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_operations: bool = Field(
        default=False,
        description="Emit a trace entry for every collection read/write",
    )

    # Validation Settings
    validation_level: ValidationLevel = Field(
        default=ValidationLevel.OFF,
        description="Default validation level for collections without an override",
    )

    # Storage Settings
    data_dir: str = "./td_data"

    # Collection Initialization Settings
    init_wait_attempts: int = Field(default=3, ge=1)
    init_wait_delay: float = Field(default=2.0, ge=0)

    @field_validator("validation_level", mode="before")
    @classmethod
    def parse_validation_level(cls, v: str | int | ValidationLevel) -> ValidationLevel:
        """Accept level names (``on_and_reject``) as well as enum values."""
        if isinstance(v, str) and not v.isdigit():
            try:
                return ValidationLevel[v.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown validation level: {v}")
        if isinstance(v, str):
            return ValidationLevel(int(v))
        return ValidationLevel(v)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached settings instance loaded from the environment.
    """
    return Settings()
