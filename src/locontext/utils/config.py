"""Configuration management for locontext.

Handles store locations and matching thresholds using Pydantic Settings.
Supports environment variables and .env files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from locontext.core.errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings.

    Loads configuration from environment variables or .env file.
    All settings can be overridden via environment variables with LOCONTEXT_ prefix.

    Example .env file:
        LOCONTEXT_TM_FILE=.locontext-tm.json
        LOCONTEXT_GLOSSARY_FILE=.locontext-glossary.json
        LOCONTEXT_MIN_SIMILARITY=0.8

    Example usage:
        >>> settings = Settings()
        >>> print(settings.min_similarity)
        0.7
    """

    # Store locations
    tm_file: Path = Field(
        default=Path(".locontext-tm.json"),
        description="Translation memory JSON file",
    )

    glossary_file: Path = Field(
        default=Path(".locontext-glossary.json"),
        description="Glossary JSON file",
    )

    # Fuzzy matching
    min_similarity: float = Field(
        default=0.7,
        description="Minimum similarity for fuzzy TM matches",
        ge=0.0,
        le=1.0,
    )

    max_matches: int = Field(
        default=5,
        description="Maximum number of fuzzy TM matches per query",
        gt=0,
    )

    # Source code analysis
    project_path: Path | None = Field(
        default=None,
        description="Project root scanned for string usage",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Model configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LOCONTEXT_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    def tm_kwargs(self) -> dict[str, Any]:
        """Get constructor arguments for ``TranslationMemory``.

        Example:
            >>> tm = TranslationMemory(**get_settings().tm_kwargs())
        """
        return {
            "storage_path": self.tm_file,
            "min_similarity": self.min_similarity,
            "max_matches": self.max_matches,
        }


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If environment values are invalid
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid locontext settings: {e}") from e
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
