"""Find the most recently modified file in a folder."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from mediabridge.storage.errors import DirectoryNotFoundError
from mediabridge.storage.models import LocatedFile, is_in_progress

logger = logging.getLogger(__name__)


class LatestFileLocator:
    """Selects the newest regular file among a directory's immediate entries.

    Pending catalog files and partial direct writes are never candidates.

    Files sharing the newest timestamp are equally acceptable; whichever the
    listing yields first wins.
    """

    def locate_latest(self, directory: str | Path) -> LocatedFile | None:
        """Return the newest regular file, or None if there is none.

        Args:
            directory: Folder to inspect (not recursive).

        Raises:
            DirectoryNotFoundError: Path is missing or not a directory.
        """
        folder = Path(directory)
        if not folder.is_dir():
            raise DirectoryNotFoundError(
                f"Folder does not exist: {directory}", details={"path": str(directory)}
            )

        latest: os.DirEntry[str] | None = None
        latest_mtime = -1
        with os.scandir(folder) as entries:
            for entry in entries:
                if is_in_progress(entry.name):
                    continue
                try:
                    if not entry.is_file():
                        continue
                    mtime = entry.stat().st_mtime_ns
                except OSError as e:
                    # Entry vanished or is unreadable between listing and stat
                    logger.debug(f"Skipping {entry.path}: {e}")
                    continue
                if mtime > latest_mtime:
                    latest, latest_mtime = entry, mtime

        if latest is None:
            logger.debug(f"No files in {folder}")
            return None
        return LocatedFile(
            path=Path(latest.path).absolute(),
            last_modified=datetime.fromtimestamp(latest_mtime / 1_000_000_000, tz=timezone.utc),
        )
