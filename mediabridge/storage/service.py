"""Storage service — wires the bridge components together.

Handles publishing payloads into shared storage and opening/sharing files
already there.

Examples:
    >>> from mediabridge.storage.service import StorageService
    >>> service = StorageService.from_config(config)
    >>> artifact = await service.save(request)
"""

from __future__ import annotations

import logging

from mediabridge.storage.backends.base import (
    ContentCatalog,
    DirectoryPicker,
    ReindexNotifier,
    ShareDispatcher,
)
from mediabridge.storage.backends.local import LocalContentCatalog, LoggingReindexNotifier
from mediabridge.storage.backends.system import SystemDirectoryPicker, SystemShareDispatcher
from mediabridge.storage.config import StorageConfig
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.locator import LatestFileLocator
from mediabridge.storage.models import PublishedArtifact, ResolvedDestination, StorageRequest
from mediabridge.storage.opener import FileOpener, OpenOutcome
from mediabridge.storage.resolver import StoragePathResolver
from mediabridge.storage.share import ShareHandoff
from mediabridge.storage.writer import PublishingWriter

logger = logging.getLogger(__name__)


class StorageService:
    """Main orchestrator for the storage bridge.

    Attributes:
        config: Storage configuration.
        catalog: Content catalog used by the indirect protocols.
        channel: Fire-and-forget boundary shared by all external sends.
        resolver: Destination policy.
        writer: Publishing writer (protocol fixed at construction).
        opener: Open/share flow.
    """

    def __init__(
        self,
        config: StorageConfig,
        catalog: ContentCatalog | None = None,
        notifier: ReindexNotifier | None = None,
        dispatcher: ShareDispatcher | None = None,
        picker: DirectoryPicker | None = None,
        channel: DispatchChannel | None = None,
    ) -> None:
        self.config = config
        self.catalog = catalog or LocalContentCatalog(
            config.root, provider_authority=config.provider_authority
        )
        self.channel = channel or DispatchChannel()
        self.resolver = StoragePathResolver(config.app_namespace)
        self.writer = PublishingWriter.for_config(
            config,
            self.catalog,
            notifier or LoggingReindexNotifier(),
            self.channel,
        )
        handoff = ShareHandoff.for_config(
            config,
            self.catalog,
            dispatcher or SystemShareDispatcher(),
            self.channel,
        )
        self.opener = FileOpener(
            LatestFileLocator(),
            handoff,
            picker or SystemDirectoryPicker(default_start=config.root),
            self.channel,
        )

    @classmethod
    def from_config(cls, config: StorageConfig) -> "StorageService":
        """Create a StorageService with the local collaborators."""
        return cls(config=config)

    def resolve(self, request: StorageRequest) -> ResolvedDestination:
        """Destination a request would be published to."""
        return self.resolver.resolve(request.mime_type, request.subfolder)

    async def save(self, request: StorageRequest) -> PublishedArtifact:
        """Resolve and publish a request.

        Args:
            request: Validated storage request.

        Returns:
            The published artifact.
        """
        destination = self.resolve(request)
        logger.debug(
            f"Saving {request.file_name} ({request.mime_type}) to {destination.relative_path}"
        )
        return await self.writer.publish(
            destination, request.file_name, request.mime_type, request.payload
        )

    async def open_folder(self, path: str) -> OpenOutcome:
        """Share the newest file in a folder, or prompt for a folder."""
        return await self.opener.open_folder(path)

    async def open_file(self, path: str) -> OpenOutcome:
        """Share a file."""
        return await self.opener.open_file(path)

    async def close(self) -> None:
        """Wait for in-flight external sends."""
        await self.channel.drain()
