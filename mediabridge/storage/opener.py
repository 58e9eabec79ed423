"""Open flow: share the newest file in a folder, or prompt for a folder.

States:
    START -> locate latest file -> SHARED        (file found, chooser sent)
                                -> PROMPT_ISSUED (no file, picker sent)

Nothing is tracked once a terminal state is reached.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from mediabridge.storage.backends.base import DirectoryPicker
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.errors import InvalidInputError
from mediabridge.storage.locator import LatestFileLocator
from mediabridge.storage.models import ShareTicket
from mediabridge.storage.share import ShareHandoff

logger = logging.getLogger(__name__)


class OpenState(str, Enum):
    """Terminal states of the open flow."""

    SHARED = "shared"
    PROMPT_ISSUED = "prompt_issued"


class OpenOutcome(BaseModel):
    """Result of an open request."""

    state: OpenState
    message: str
    ticket: ShareTicket | None = None


class FileOpener:
    """Combines the locator, share handoff and directory picker."""

    def __init__(
        self,
        locator: LatestFileLocator,
        handoff: ShareHandoff,
        picker: DirectoryPicker,
        channel: DispatchChannel,
    ) -> None:
        self.locator = locator
        self.handoff = handoff
        self.picker = picker
        self.channel = channel

    async def open_folder(self, path: str) -> OpenOutcome:
        """Share the newest file in ``path`` or ask the user to pick a folder.

        Raises:
            InvalidInputError: Empty path.
            DirectoryNotFoundError: Path missing or not a directory.
            SharedFileNotFoundError: Newest file vanished before sharing.
        """
        if not path or not path.strip():
            raise InvalidInputError("Path is null")

        latest = self.locator.locate_latest(path)
        if latest is not None:
            return await self.open_file(str(latest.path))

        self.channel.send(
            self.picker.request_directory_selection(Path(path)),
            label=f"directory picker for {path}",
        )
        logger.info(f"No files in {path}, directory picker requested")
        return OpenOutcome(state=OpenState.PROMPT_ISSUED, message="Folder picker opened")

    async def open_file(self, path: str) -> OpenOutcome:
        """Share the file at ``path``.

        Raises:
            InvalidInputError: Empty path.
            SharedFileNotFoundError: File does not exist.
        """
        if not path or not path.strip():
            raise InvalidInputError("Path is null")
        ticket = await self.handoff.share_existing(path)
        return OpenOutcome(
            state=OpenState.SHARED,
            message=f"File shared: {ticket.file_name}",
            ticket=ticket,
        )
