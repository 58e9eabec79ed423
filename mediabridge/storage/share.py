"""Hand an existing file to the external share chooser.

On platforms that require it the file is exposed through an indirect
content reference granted by the catalog; older platforms get a plain
``file://`` URI. The reference strategy is chosen once from the capability
level.
"""

from __future__ import annotations

import logging
import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path

from mediabridge.storage.backends.base import ContentCatalog, ShareDispatcher
from mediabridge.storage.config import StorageConfig
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.errors import InvalidInputError, SharedFileNotFoundError
from mediabridge.storage.models import UNKNOWN_MIME_TYPE, ShareTicket

logger = logging.getLogger(__name__)


def guess_mime_type(path: str | Path) -> str:
    """Mime type from the file extension, ``*/*`` when unknown."""
    mime_type, _ = mimetypes.guess_type(Path(path).name.lower(), strict=False)
    return mime_type or UNKNOWN_MIME_TYPE


class ShareReference(ABC):
    """Strategy producing a readable reference for another application."""

    @abstractmethod
    async def reference_for(self, path: Path) -> str:
        """Return a reference to ``path`` that can be handed out."""


class CatalogShareReference(ShareReference):
    """Indirect ``content://`` reference granted by the catalog."""

    def __init__(self, catalog: ContentCatalog) -> None:
        self.catalog = catalog

    async def reference_for(self, path: Path) -> str:
        return await self.catalog.share_reference(path)


class DirectShareReference(ShareReference):
    async def reference_for(self, path: Path) -> str:
        return path.resolve().as_uri()


def select_share_reference(config: StorageConfig, catalog: ContentCatalog) -> ShareReference:
    """Pick the reference strategy for the configured capability level."""
    if config.uses_share_provider:
        return CatalogShareReference(catalog)
    return DirectShareReference()


class ShareHandoff:
    """Builds share tickets and sends them to the chooser without waiting.

    Attributes:
        config: Storage configuration (ticket text templates).
        references: Reference strategy selected at construction.
        dispatcher: External share chooser.
        channel: Fire-and-forget boundary.
    """

    def __init__(
        self,
        config: StorageConfig,
        references: ShareReference,
        dispatcher: ShareDispatcher,
        channel: DispatchChannel,
    ) -> None:
        self.config = config
        self.references = references
        self.dispatcher = dispatcher
        self.channel = channel

    @classmethod
    def for_config(
        cls,
        config: StorageConfig,
        catalog: ContentCatalog,
        dispatcher: ShareDispatcher,
        channel: DispatchChannel,
    ) -> "ShareHandoff":
        """Create a handoff using the reference strategy for ``config.api_level``."""
        return cls(config, select_share_reference(config, catalog), dispatcher, channel)

    async def share_existing(self, file_path: str | Path) -> ShareTicket:
        """Share an existing file.

        Args:
            file_path: Path of the file to share.

        Returns:
            The ShareTicket that was dispatched.

        Raises:
            InvalidInputError: Empty path.
            SharedFileNotFoundError: File does not exist; nothing is dispatched.
        """
        if not str(file_path).strip():
            raise InvalidInputError("Path is empty")
        path = Path(file_path)
        if not path.exists():
            raise SharedFileNotFoundError(
                f"File does not exist: {file_path}", details={"path": str(file_path)}
            )

        reference = await self.references.reference_for(path)
        ticket = ShareTicket(
            reference=reference,
            mime_type=guess_mime_type(path),
            subject=self.config.share_subject_template.format(file_name=path.name),
            body=self.config.share_body.format(app_name=self.config.app_namespace),
            chooser_title=self.config.share_chooser_title,
            file_name=path.name,
        )
        self.channel.send(self.dispatcher.present_chooser(ticket), label=f"share {path.name}")
        logger.info(f"Share chooser requested for {path} ({ticket.mime_type})")
        return ticket
