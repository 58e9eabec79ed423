"""Publishing writer and its two write protocols.

The protocol is picked once, from the platform capability level, when the
writer is built:

- IndirectWriteProtocol: pending catalog entry -> write channel -> clear
  pending. Returns the catalog entry id.
- DirectWriteProtocol: create folders -> write a partial file -> atomic
  replace. Returns the absolute path.

Examples:
    >>> writer = PublishingWriter.for_config(config, catalog, notifier, channel)
    >>> artifact = await writer.publish(destination, "report.pdf", "application/pdf", data)
    >>> artifact.reference
    'content://media/external/files/media/3f2a9c0e5b7d4e1f8a6b2c9d0e4f7a1b'
"""

from __future__ import annotations

import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path

from mediabridge.storage.backends.base import ContentCatalog, ReindexNotifier
from mediabridge.storage.config import StorageConfig
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.errors import (
    CatalogInsertFailedError,
    MediaBridgeError,
    StorageUnavailableError,
    WriteFailedError,
)
from mediabridge.storage.models import (
    PARTIAL_SUFFIX,
    PublishedArtifact,
    ResolvedDestination,
    validate_file_name,
)

logger = logging.getLogger(__name__)


class WriteProtocol(ABC):
    """Strategy that turns a resolved destination and bytes into an artifact."""

    name: str

    def __init__(self, notifier: ReindexNotifier, channel: DispatchChannel) -> None:
        self.notifier = notifier
        self.channel = channel

    @abstractmethod
    async def write(
        self,
        destination: ResolvedDestination,
        file_name: str,
        mime_type: str,
        payload: bytes,
    ) -> PublishedArtifact:
        """Write ``payload`` and return the durable artifact.

        Raises:
            StorageUnavailableError: Storage surface unreachable.
            WriteFailedError: Bytes could not be fully flushed.
            CatalogInsertFailedError: Catalog refused the entry.
        """

    def _request_reindex(self, path: str, mime_type: str) -> None:
        try:
            message = self.notifier.notify(path, mime_type)
        except Exception as e:
            logger.warning(f"Media scan request failed for {path}: {e}")
            return
        self.channel.send(message, label=f"reindex {path}")


class IndirectWriteProtocol(WriteProtocol):
    """Broker-mediated write through the content catalog.

    A failure after the entry is inserted leaves the pending entry behind in
    its incomplete state; it is not rolled back.
    """

    name = "indirect"

    def __init__(
        self,
        catalog: ContentCatalog,
        notifier: ReindexNotifier,
        channel: DispatchChannel,
    ) -> None:
        super().__init__(notifier, channel)
        self.catalog = catalog

    async def write(
        self,
        destination: ResolvedDestination,
        file_name: str,
        mime_type: str,
        payload: bytes,
    ) -> PublishedArtifact:
        # 1. Register pending entry
        try:
            entry_id = await self.catalog.insert_pending_entry(
                file_name,
                mime_type,
                destination.relative_path,
                destination.category.collection,
            )
        except StorageUnavailableError:
            raise
        except (OSError, MediaBridgeError) as e:
            raise CatalogInsertFailedError(f"Failed to create catalog entry: {e}") from e
        if entry_id is None:
            raise CatalogInsertFailedError(
                "Failed to create catalog entry",
                details={"relative_path": destination.relative_path, "file_name": file_name},
            )

        # 2-3. Stream the payload through the write channel
        try:
            sink = self.catalog.open_write_channel(entry_id)
        except (OSError, MediaBridgeError) as e:
            self._log_orphan(entry_id, e)
            raise WriteFailedError(
                f"Failed to open output stream: {e}", details={"entry_id": entry_id}
            ) from e
        if sink is None:
            self._log_orphan(entry_id, "no stream")
            raise WriteFailedError("Failed to open output stream", details={"entry_id": entry_id})
        try:
            with sink:
                sink.write(payload)
                sink.flush()
        except OSError as e:
            self._log_orphan(entry_id, e)
            raise WriteFailedError(
                f"Failed to write payload: {e}", details={"entry_id": entry_id}
            ) from e

        # 4. Publish
        try:
            await self.catalog.clear_pending(entry_id)
        except (OSError, MediaBridgeError) as e:
            self._log_orphan(entry_id, e)
            raise WriteFailedError(
                f"Failed to publish catalog entry: {e}", details={"entry_id": entry_id}
            ) from e

        await self._scan_entry(entry_id, mime_type)
        return PublishedArtifact(reference=entry_id, is_pending=False, protocol=self.name)

    async def _scan_entry(self, entry_id: str, mime_type: str) -> None:
        try:
            path = await self.catalog.query_direct_path(entry_id)
        except Exception as e:
            logger.warning(f"Media scanner warning: {e}")
            return
        if path:
            self._request_reindex(path, mime_type)

    @staticmethod
    def _log_orphan(entry_id: str, reason: object) -> None:
        logger.warning(f"Pending catalog entry left incomplete: {entry_id} ({reason})")


class DirectWriteProtocol(WriteProtocol):
    """Unmediated write below the shared storage root."""

    name = "direct"

    def __init__(self, root: Path, notifier: ReindexNotifier, channel: DispatchChannel) -> None:
        super().__init__(notifier, channel)
        self.root = Path(root)

    async def write(
        self,
        destination: ResolvedDestination,
        file_name: str,
        mime_type: str,
        payload: bytes,
    ) -> PublishedArtifact:
        if not self.root.is_dir():
            raise StorageUnavailableError(
                f"Shared storage is not mounted: {self.root}", details={"root": str(self.root)}
            )

        folder = self.root / destination.relative_path
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"Cannot create {folder}: {e}") from e

        target = folder / file_name
        partial = folder / f".{uuid.uuid4().hex}{PARTIAL_SUFFIX}"
        try:
            with partial.open("wb") as sink:
                sink.write(payload)
                sink.flush()
                os.fsync(sink.fileno())
            os.replace(partial, target)
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise WriteFailedError(
                f"Failed to write {target}: {e}", details={"path": str(target)}
            ) from e

        absolute = str(target.resolve())
        self._request_reindex(absolute, mime_type)
        return PublishedArtifact(reference=absolute, is_pending=False, protocol=self.name)


def select_write_protocol(
    config: StorageConfig,
    catalog: ContentCatalog,
    notifier: ReindexNotifier,
    channel: DispatchChannel,
) -> WriteProtocol:
    """Pick the write protocol for the configured capability level."""
    if config.uses_scoped_storage:
        return IndirectWriteProtocol(catalog, notifier, channel)
    return DirectWriteProtocol(config.root, notifier, channel)


class PublishingWriter:
    """Writes payloads into shared storage through a fixed protocol.

    Attributes:
        protocol: Write protocol selected at construction.
    """

    def __init__(self, protocol: WriteProtocol) -> None:
        self.protocol = protocol

    @classmethod
    def for_config(
        cls,
        config: StorageConfig,
        catalog: ContentCatalog,
        notifier: ReindexNotifier,
        channel: DispatchChannel,
    ) -> "PublishingWriter":
        """Create a writer using the protocol for ``config.api_level``."""
        return cls(select_write_protocol(config, catalog, notifier, channel))

    async def publish(
        self,
        destination: ResolvedDestination,
        file_name: str,
        mime_type: str,
        payload: bytes,
    ) -> PublishedArtifact:
        """Publish ``payload`` as ``file_name`` at ``destination``.

        Args:
            destination: Resolved shared storage destination.
            file_name: Visible file name (single segment, non-empty).
            mime_type: Mime type recorded with the file.
            payload: Raw bytes, written unchanged.

        Returns:
            PublishedArtifact with a catalog id or absolute path.

        Raises:
            InvalidInputError: Empty or multi-segment file name (before any I/O).
            StorageUnavailableError: Storage surface unreachable.
            WriteFailedError: Bytes could not be fully flushed.
            CatalogInsertFailedError: Catalog refused the entry.
        """
        validate_file_name(file_name)
        artifact = await self.protocol.write(destination, file_name, mime_type, payload)
        logger.info(
            f"Published {destination.relative_path}/{file_name} "
            f"({len(payload)} bytes, {self.protocol.name}) -> {artifact.reference}"
        )
        return artifact
