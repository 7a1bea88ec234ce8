"""Environment-aware configuration with validation.

This module provides centralized configuration management using Pydantic Settings.
All environment variables are validated on first use to fail fast on misconfigurations.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Package locator settings loaded from environment variables.

    Every setting has a default matching the file names produced by the
    usual question-pool exports, so no environment is required.

    Example:
        >>> settings = get_settings()
        >>> print(settings.manifest_marker)
        'qpl'
    """

    model_config = SettingsConfigDict(
        env_prefix="QTI_",
        case_sensitive=False,
        extra="ignore",
    )

    # File name heuristics (case-sensitive substring + suffix)
    manifest_marker: str = Field(
        default="qpl",
        min_length=1,
        description="Substring identifying the package manifest file",
    )
    assessment_marker: str = Field(
        default="qti",
        min_length=1,
        description="Substring identifying the assessment document file",
    )
    document_suffix: str = Field(
        default=".xml",
        description="Required file name suffix for both documents",
    )

    @field_validator("document_suffix")
    @classmethod
    def validate_document_suffix(cls, v: str) -> str:
        """Ensure the suffix looks like a file extension."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError("Document suffix must start with '.' (e.g., '.xml')")
        return v

    @property
    def manifest_pattern(self) -> str:
        """Human-readable manifest pattern (e.g., '*qpl*.xml')."""
        return f"*{self.manifest_marker}*{self.document_suffix}"

    @property
    def assessment_pattern(self) -> str:
        """Human-readable assessment pattern (e.g., '*qti*.xml')."""
        return f"*{self.assessment_marker}*{self.document_suffix}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings.

    Settings are loaded once and cached for the lifetime of the process.

    Returns:
        Validated Settings instance

    Raises:
        ValidationError: If environment variables are invalid
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Useful for testing when environment variables change.
    """
    get_settings.cache_clear()
