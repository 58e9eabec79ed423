"""Filesystem-backed catalog and notifier for a local shared storage root."""

from __future__ import annotations

import itertools
import logging
import os
import re
import uuid
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from mediabridge.storage.backends.base import ContentCatalog, ReindexNotifier
from mediabridge.storage.errors import StorageUnavailableError
from mediabridge.storage.models import PENDING_PREFIX

logger = logging.getLogger(__name__)

CATALOG_DIR = ".catalog"

_TOKEN = re.compile(r"[0-9a-f]{32}")


class CatalogEntry(BaseModel):
    """Bookkeeping record for one catalog entry, persisted as JSON."""

    entry_id: str
    name: str
    mime_type: str
    relative_path: str
    collection: str
    stored_name: str
    pending: bool = True


def unique_path(folder: Path, name: str) -> Path:
    """First free ``name``, ``name (1)``, ``name (2)``... in ``folder``."""
    candidate = folder / name
    stem, suffix = Path(name).stem, Path(name).suffix
    for n in itertools.count(1):
        if not candidate.exists():
            return candidate
        candidate = folder / f"{stem} ({n}){suffix}"
    raise AssertionError("unreachable")


class LocalContentCatalog(ContentCatalog):
    """Pathlib-based content catalog over a shared storage root.

    Pending entries are written to hidden ``.pending-<token>`` files in their
    final folder; clearing the pending flag renames them to a visible,
    de-duplicated name. Each entry's record lives under ``<root>/.catalog``,
    keyed by the random token in its id, so ids stay unique and resolvable
    across catalog instances and restarts.
    """

    def __init__(
        self,
        root: Path,
        provider_authority: str = "com.mediabridge.app.fileprovider",
        authority: str = "media",
        volume: str = "external",
    ) -> None:
        self.root = Path(root)
        self.provider_authority = provider_authority
        self.authority = authority
        self.volume = volume

    @property
    def _id_prefix(self) -> str:
        return f"content://{self.authority}/{self.volume}/"

    def _require_root(self) -> None:
        if not self.root.is_dir():
            raise StorageUnavailableError(
                f"Shared storage is not mounted: {self.root}",
                details={"root": str(self.root)},
            )

    def _record_path(self, collection: str, token: str) -> Path:
        return self.root / CATALOG_DIR / collection / f"{token}.json"

    def _locate_record(self, entry_id: str) -> Path:
        unknown = StorageUnavailableError(
            f"Unknown catalog entry: {entry_id}",
            details={"entry_id": entry_id},
        )
        if not entry_id.startswith(self._id_prefix):
            raise unknown
        parts = entry_id[len(self._id_prefix):].split("/")
        if len(parts) != 3 or parts[1] != "media" or not _TOKEN.fullmatch(parts[2]):
            raise unknown
        collection, _, token = parts
        if not collection or collection.startswith("."):
            raise unknown
        record = self._record_path(collection, token)
        if not record.is_file():
            raise unknown
        return record

    def _save(self, record: Path, entry: CatalogEntry) -> None:
        staging = record.with_suffix(".tmp")
        staging.write_text(entry.model_dump_json(), encoding="utf-8")
        os.replace(staging, record)

    def _entry(self, entry_id: str) -> tuple[Path, CatalogEntry]:
        record = self._locate_record(entry_id)
        try:
            entry = CatalogEntry.model_validate_json(record.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise StorageUnavailableError(
                f"Unreadable catalog entry: {entry_id}",
                details={"entry_id": entry_id, "error": str(e)},
            ) from e
        return record, entry

    def get_entry(self, entry_id: str) -> CatalogEntry:
        """Return the bookkeeping record for ``entry_id``."""
        return self._entry(entry_id)[1]

    def entry_path(self, entry: CatalogEntry) -> Path:
        """Current backing file of ``entry`` (pending or visible)."""
        return self.root / entry.relative_path / entry.stored_name

    async def insert_pending_entry(
        self,
        name: str,
        mime_type: str,
        relative_path: str,
        collection: str,
    ) -> str | None:
        """Create an empty hidden file and record it as pending."""
        self._require_root()
        token = uuid.uuid4().hex
        entry = CatalogEntry(
            entry_id=f"{self._id_prefix}{collection}/media/{token}",
            name=name,
            mime_type=mime_type,
            relative_path=relative_path,
            collection=collection,
            stored_name=f"{PENDING_PREFIX}{token}",
        )
        record = self._record_path(collection, token)
        pending_path = self.entry_path(entry)
        try:
            pending_path.parent.mkdir(parents=True, exist_ok=True)
            pending_path.touch(exist_ok=False)
        except OSError as e:
            logger.warning(f"Catalog insert refused for {relative_path}/{name}: {e}")
            return None
        try:
            record.parent.mkdir(parents=True, exist_ok=True)
            self._save(record, entry)
        except OSError as e:
            logger.warning(f"Catalog record not written for {relative_path}/{name}: {e}")
            pending_path.unlink(missing_ok=True)
            return None

        logger.debug(f"Catalog entry inserted: {entry.entry_id} -> {pending_path}")
        return entry.entry_id

    def open_write_channel(self, entry_id: str) -> BinaryIO:
        """Open the pending file for writing."""
        _, entry = self._entry(entry_id)
        if not entry.pending:
            raise StorageUnavailableError(f"Catalog entry is not pending: {entry_id}")
        return self.entry_path(entry).open("wb")

    def open_read_channel(self, entry_id: str) -> BinaryIO:
        """Open a published entry for reading."""
        _, entry = self._entry(entry_id)
        if entry.pending:
            raise StorageUnavailableError(f"Catalog entry is still pending: {entry_id}")
        return self.entry_path(entry).open("rb")

    async def clear_pending(self, entry_id: str) -> None:
        """Rename the pending file to its visible name."""
        record, entry = self._entry(entry_id)
        if not entry.pending:
            return
        pending_path = self.entry_path(entry)
        final_path = unique_path(pending_path.parent, entry.name)
        pending_path.rename(final_path)
        published = entry.model_copy(update={"stored_name": final_path.name, "pending": False})
        self._save(record, published)
        logger.debug(f"Catalog entry published: {entry_id} -> {final_path}")

    async def query_direct_path(self, entry_id: str) -> str | None:
        """Backing path of a published entry; pending entries expose none."""
        _, entry = self._entry(entry_id)
        if entry.pending:
            return None
        return str(self.entry_path(entry).resolve())

    async def share_reference(self, path: Path) -> str:
        """Content reference for an existing file, relative to the provider root."""
        resolved = Path(path).resolve()
        return f"content://{self.provider_authority}/root{quote(resolved.as_posix())}"


class LoggingReindexNotifier(ReindexNotifier):
    """Reindex notifier for hosts without a media scanner: logs the request."""

    async def notify(self, path: str, mime_type: str) -> None:
        logger.info(f"Scan requested: {path} ({mime_type})")
