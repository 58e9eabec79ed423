"""Abstract collaborators consumed by the storage bridge."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from mediabridge.storage.models import ShareTicket


class ContentCatalog(ABC):
    """Content-indexing broker that mediates access to shared storage.

    Entries are addressed by opaque ids instead of filesystem paths. A
    pending entry is not visible to other consumers until its pending flag
    is cleared.
    """

    @abstractmethod
    async def insert_pending_entry(
        self,
        name: str,
        mime_type: str,
        relative_path: str,
        collection: str,
    ) -> str | None:
        """Register a pending entry.

        Args:
            name: Display name of the file.
            mime_type: Mime type of the content.
            relative_path: Folder relative to the shared storage root.
            collection: Catalog collection (``images`` or ``files``).

        Returns:
            The entry id, or None if the catalog refused the entry.
        """

    @abstractmethod
    def open_write_channel(self, entry_id: str) -> BinaryIO:
        """Open a binary sink for a pending entry.

        The caller closes the returned stream.

        Args:
            entry_id: Id returned by ``insert_pending_entry``.
        """

    @abstractmethod
    def open_read_channel(self, entry_id: str) -> BinaryIO:
        """Open a binary source for a published entry.

        Args:
            entry_id: Id of a published entry.
        """

    @abstractmethod
    async def clear_pending(self, entry_id: str) -> None:
        """Clear the pending flag, making the entry visible.

        Args:
            entry_id: Id of a pending entry.
        """

    @abstractmethod
    async def query_direct_path(self, entry_id: str) -> str | None:
        """Return the backing filesystem path of an entry, if exposed.

        Args:
            entry_id: Id of an entry.
        """

    @abstractmethod
    async def share_reference(self, path: Path) -> str:
        """Grant an indirect, readable reference to an existing file.

        Args:
            path: Absolute path of the file.

        Returns:
            Opaque content reference.
        """


class ShareDispatcher(ABC):
    """External share chooser."""

    @abstractmethod
    async def present_chooser(self, ticket: ShareTicket) -> None:
        """Present the chooser for ``ticket``; the user's pick is not reported."""


class DirectoryPicker(ABC):
    """User-driven folder selection prompt."""

    @abstractmethod
    async def request_directory_selection(self, start: Path | None = None) -> None:
        """Prompt the user to pick a folder; the result is not consumed.

        Args:
            start: Optional folder the prompt starts in.
        """


class ReindexNotifier(ABC):
    """Advisory notification so file browsers pick up new files."""

    @abstractmethod
    async def notify(self, path: str, mime_type: str) -> None:
        """Ask the platform to rescan ``path``.

        Args:
            path: Absolute path of the new file.
            mime_type: Mime type of the file.
        """
