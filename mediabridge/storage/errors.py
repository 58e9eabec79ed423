"""Exception hierarchy for storage bridge operations.

Every error carries a short machine-readable ``kind`` next to the
human-readable message, so the method bridge can turn it into a structured
error result without inspecting the message text.
"""

from __future__ import annotations

from typing import Any


class MediaBridgeError(Exception):
    """Base exception for storage bridge errors.

    Attributes:
        kind: Machine-readable error kind
        message: Human-readable detail
        details: Extra context (paths, entry ids)
    """

    kind = "Error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize bridge error.

        Args:
            message: Human-readable detail.
            details: Optional extra context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"


class InvalidInputError(MediaBridgeError):
    """A required argument is missing or malformed (raised before any I/O)."""

    kind = "InvalidInput"


class DirectoryNotFoundError(MediaBridgeError):
    """Target directory does not exist or is not a directory."""

    kind = "DirectoryNotFound"


class SharedFileNotFoundError(MediaBridgeError):
    """File to share does not exist at call time."""

    kind = "FileNotFound"


class StorageUnavailableError(MediaBridgeError):
    """The shared storage surface or the catalog cannot be reached."""

    kind = "StorageUnavailable"


class WriteFailedError(MediaBridgeError):
    """The byte stream could not be fully written and flushed."""

    kind = "WriteFailed"


class CatalogInsertFailedError(MediaBridgeError):
    """The catalog refused to create a pending entry."""

    kind = "CatalogInsertFailed"


class ExternalDispatchFailedError(MediaBridgeError):
    """A fire-and-forget send failed. Logged, never surfaced to callers."""

    kind = "ExternalDispatchFailed"
