"""Storage configuration model."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from mediabridge.config import Settings


class StorageConfig(BaseModel):
    """Configuration handed to the storage components at construction.

    Attributes:
        root: Root directory of the shared storage volume.
        app_namespace: Folder grouping this app's files inside each category.
        api_level: Capability level of the host platform.
        scoped_storage_level: First level that requires catalog-mediated writes.
        share_provider_level: First level that requires indirect share references.
        provider_authority: Authority of indirect share references.
        share_subject_template: Share subject, ``{file_name}`` is substituted.
        share_body: Share body, ``{app_name}`` is substituted.
        share_chooser_title: Title of the share chooser.
    """

    root: Path = Field(default_factory=Path.home, description="Shared storage root")
    app_namespace: str = Field(default="MediaBridge", description="App folder name")
    api_level: int = Field(default=29, ge=1, description="Platform capability level")
    scoped_storage_level: int = Field(default=29, ge=1)
    share_provider_level: int = Field(default=24, ge=1)
    provider_authority: str = Field(default="com.mediabridge.app.fileprovider")
    share_subject_template: str = Field(default="Backup - {file_name}")
    share_body: str = Field(default="File exported from {app_name}")
    share_chooser_title: str = Field(default="Share file")

    @property
    def uses_scoped_storage(self) -> bool:
        return self.api_level >= self.scoped_storage_level

    @property
    def uses_share_provider(self) -> bool:
        return self.api_level >= self.share_provider_level

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageConfig:
        """Build the component config from application settings."""
        return cls(
            root=settings.PUBLIC_STORAGE_ROOT,
            app_namespace=settings.APP_NAMESPACE,
            api_level=settings.PLATFORM_API_LEVEL,
            scoped_storage_level=settings.SCOPED_STORAGE_MIN_LEVEL,
            share_provider_level=settings.SHARE_PROVIDER_MIN_LEVEL,
            provider_authority=settings.provider_authority,
            share_subject_template=settings.SHARE_SUBJECT_TEMPLATE,
            share_body=settings.SHARE_BODY,
            share_chooser_title=settings.SHARE_CHOOSER_TITLE,
        )
