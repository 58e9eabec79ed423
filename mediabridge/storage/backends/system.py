"""Desktop handoff collaborators built on click.launch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import click

from mediabridge.storage.backends.base import DirectoryPicker, ShareDispatcher
from mediabridge.storage.errors import ExternalDispatchFailedError
from mediabridge.storage.models import ShareTicket

logger = logging.getLogger(__name__)


def _ticket_target(ticket: ShareTicket) -> str:
    """Local path behind a ticket reference; content references pass through."""
    parsed = urlparse(ticket.reference)
    if parsed.scheme == "file":
        return unquote(parsed.path)
    if parsed.scheme == "content" and parsed.path.startswith("/root/"):
        return unquote(parsed.path[len("/root"):])
    return ticket.reference


class SystemShareDispatcher(ShareDispatcher):
    """Opens the shared file with the desktop's default application."""

    async def present_chooser(self, ticket: ShareTicket) -> None:
        target = _ticket_target(ticket)
        logger.info(f"{ticket.chooser_title}: {ticket.file_name} ({ticket.mime_type})")
        code = await asyncio.to_thread(click.launch, target)
        if code != 0:
            raise ExternalDispatchFailedError(
                f"Launcher exited with {code} for {target}",
                details={"reference": ticket.reference},
            )


class SystemDirectoryPicker(DirectoryPicker):
    """Opens the desktop file manager so the user can pick a folder."""

    def __init__(self, default_start: Path | None = None) -> None:
        self.default_start = default_start

    async def request_directory_selection(self, start: Path | None = None) -> None:
        folder = start or self.default_start or Path.home()
        logger.info(f"Directory selection requested in {folder}")
        code = await asyncio.to_thread(click.launch, str(folder))
        if code != 0:
            raise ExternalDispatchFailedError(f"File manager exited with {code} for {folder}")
