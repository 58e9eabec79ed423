"""Application configuration with Pydantic Settings.

This module provides centralized configuration management using pydantic-settings.
Settings are loaded from environment variables and .env files.

Examples:
    >>> from mediabridge.config import get_settings
    >>> settings = get_settings()
    >>> settings.PLATFORM_API_LEVEL
    29

    >>> settings.media_store_channel
    'com.mediabridge.app/media_store'

Tests:
    - tests/unit/test_config.py::TestSettings
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# Platform capability levels (Android API levels the bridge was modelled on).
# At or above SCOPED_STORAGE the shared volumes are only reachable through
# the content catalog; at or above SHARE_PROVIDER files must be shared
# through an indirect content reference instead of a file:// URI.
SCOPED_STORAGE_LEVEL = 29
SHARE_PROVIDER_LEVEL = 24


class Settings(BaseSettings):
    """Application settings for the storage bridge.

    Settings are loaded from environment variables and .env file.

    Attributes:
        PUBLIC_STORAGE_ROOT: Root of the shared storage volume
        APP_NAMESPACE: Folder grouping this app's files inside each category
        APP_ID: Application identifier used to build channel names
        PLATFORM_API_LEVEL: Capability level of the host platform
        SCOPED_STORAGE_MIN_LEVEL: First level that requires catalog-mediated writes
        SHARE_PROVIDER_MIN_LEVEL: First level that requires indirect share references
        SHARE_SUBJECT_TEMPLATE: Subject for the share ticket ({file_name} placeholder)
        SHARE_BODY: Body text for the share ticket ({app_name} placeholder)
        SHARE_CHOOSER_TITLE: Title of the share chooser
        LOG_LEVEL: Root logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Storage
    PUBLIC_STORAGE_ROOT: Path = Field(
        default_factory=Path.home,
        description="Root directory of the shared storage volume",
    )
    APP_NAMESPACE: str = Field(
        default="MediaBridge",
        description="Folder grouping this app's files (empty to disable)",
    )
    APP_ID: str = Field(
        default="com.mediabridge.app",
        description="Application identifier, prefixes channel names",
    )

    # Platform capabilities
    PLATFORM_API_LEVEL: int = Field(
        default=SCOPED_STORAGE_LEVEL,
        description="Capability level of the host platform",
        ge=1,
    )
    SCOPED_STORAGE_MIN_LEVEL: int = Field(
        default=SCOPED_STORAGE_LEVEL,
        description="First level requiring catalog-mediated shared writes",
        ge=1,
    )
    SHARE_PROVIDER_MIN_LEVEL: int = Field(
        default=SHARE_PROVIDER_LEVEL,
        description="First level requiring indirect share references",
        ge=1,
    )

    # Share ticket text
    SHARE_SUBJECT_TEMPLATE: str = Field(
        default="Backup - {file_name}",
        description="Share subject, {file_name} is substituted",
    )
    SHARE_BODY: str = Field(
        default="File exported from {app_name}",
        description="Share body, {app_name} is substituted",
    )
    SHARE_CHOOSER_TITLE: str = Field(
        default="Share file",
        description="Title shown by the share chooser",
    )

    # Application Settings
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize the log level name."""
        level = v.upper()
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if level not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of: {valid_levels}")
        return level

    @field_validator("APP_NAMESPACE")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Namespace must be a single path segment."""
        v = v.strip()
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("APP_NAMESPACE must be a single folder name")
        return v

    @model_validator(mode="after")
    def validate_levels(self) -> "Settings":
        """Share indirection always starts at or before scoped storage."""
        if self.SHARE_PROVIDER_MIN_LEVEL > self.SCOPED_STORAGE_MIN_LEVEL:
            raise ValueError(
                "SHARE_PROVIDER_MIN_LEVEL must not exceed SCOPED_STORAGE_MIN_LEVEL"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def uses_scoped_storage(self) -> bool:
        """Check if shared writes must go through the content catalog."""
        return self.PLATFORM_API_LEVEL >= self.SCOPED_STORAGE_MIN_LEVEL

    @property
    def media_store_channel(self) -> str:
        """Channel name for the public storage methods."""
        return f"{self.APP_ID}/media_store"

    @property
    def file_manager_channel(self) -> str:
        """Channel name for the open/share methods."""
        return f"{self.APP_ID}/file_manager"

    @property
    def provider_authority(self) -> str:
        """Authority used for indirect share references."""
        return f"{self.APP_ID}.fileprovider"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The application settings.

    Examples:
        >>> settings = get_settings()
        >>> settings.APP_NAMESPACE
        'MediaBridge'
    """
    return Settings()
