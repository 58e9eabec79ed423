"""Collaborator interfaces and their local implementations."""

from mediabridge.storage.backends.base import (
    ContentCatalog,
    DirectoryPicker,
    ReindexNotifier,
    ShareDispatcher,
)
from mediabridge.storage.backends.local import LocalContentCatalog, LoggingReindexNotifier
from mediabridge.storage.backends.system import SystemDirectoryPicker, SystemShareDispatcher

__all__ = [
    "ContentCatalog",
    "DirectoryPicker",
    "LocalContentCatalog",
    "LoggingReindexNotifier",
    "ReindexNotifier",
    "ShareDispatcher",
    "SystemDirectoryPicker",
    "SystemShareDispatcher",
]
