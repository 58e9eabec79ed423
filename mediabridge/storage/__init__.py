"""Shared storage package for MediaBridge.

Resolves public storage destinations, publishes payloads through the write
protocol matching the platform, and hands existing files to the share
chooser.

Examples:
    >>> from mediabridge.storage import StorageService, StorageConfig, StorageRequest
    >>> service = StorageService.from_config(StorageConfig())
    >>> artifact = await service.save(StorageRequest(file_name="a.png", payload=data))
"""

from mediabridge.storage.config import StorageConfig
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.errors import (
    CatalogInsertFailedError,
    DirectoryNotFoundError,
    ExternalDispatchFailedError,
    InvalidInputError,
    MediaBridgeError,
    SharedFileNotFoundError,
    StorageUnavailableError,
    WriteFailedError,
)
from mediabridge.storage.locator import LatestFileLocator
from mediabridge.storage.models import (
    ContentCategory,
    LocatedFile,
    PublishedArtifact,
    ResolvedDestination,
    ShareTicket,
    StorageRequest,
)
from mediabridge.storage.opener import FileOpener, OpenOutcome, OpenState
from mediabridge.storage.resolver import StoragePathResolver
from mediabridge.storage.service import StorageService
from mediabridge.storage.share import ShareHandoff
from mediabridge.storage.writer import (
    DirectWriteProtocol,
    IndirectWriteProtocol,
    PublishingWriter,
    WriteProtocol,
)

__all__ = [
    "CatalogInsertFailedError",
    "ContentCategory",
    "DirectWriteProtocol",
    "DirectoryNotFoundError",
    "DispatchChannel",
    "ExternalDispatchFailedError",
    "FileOpener",
    "IndirectWriteProtocol",
    "InvalidInputError",
    "LatestFileLocator",
    "LocatedFile",
    "MediaBridgeError",
    "OpenOutcome",
    "OpenState",
    "PublishedArtifact",
    "PublishingWriter",
    "ResolvedDestination",
    "ShareHandoff",
    "ShareTicket",
    "SharedFileNotFoundError",
    "StorageConfig",
    "StorageRequest",
    "StoragePathResolver",
    "StorageService",
    "StorageUnavailableError",
    "WriteFailedError",
    "WriteProtocol",
]
