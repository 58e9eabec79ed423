"""Tests for mediabridge.storage.opener module.

Covers the open flow terminals: SHARED and PROMPT_ISSUED, plus its errors.
"""

import pytest

from mediabridge.storage.errors import (
    DirectoryNotFoundError,
    InvalidInputError,
    SharedFileNotFoundError,
)
from mediabridge.storage.opener import OpenState
from tests.utils.storage_helpers import write_file


@pytest.fixture
def opener(make_service):
    return make_service().opener


class TestOpenFolder:
    """Tests for FileOpener.open_folder()."""

    @pytest.mark.asyncio
    async def test_shares_newest_file(self, opener, tmp_path, dispatcher, picker, channel):
        write_file(tmp_path / "backup-1.zip", b"1", 1_700_000_000)
        write_file(tmp_path / "backup-2.zip", b"2", 1_700_000_500)

        outcome = await opener.open_folder(str(tmp_path))
        await channel.drain()

        assert outcome.state == OpenState.SHARED
        assert outcome.message == "File shared: backup-2.zip"
        assert outcome.ticket.mime_type == "application/zip"
        dispatcher.present_chooser.assert_awaited_once_with(outcome.ticket)
        picker.request_directory_selection.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_folder_prompts(self, opener, tmp_path, dispatcher, picker, channel):
        outcome = await opener.open_folder(str(tmp_path))
        await channel.drain()

        assert outcome.state == OpenState.PROMPT_ISSUED
        assert outcome.message == "Folder picker opened"
        assert outcome.ticket is None
        picker.request_directory_selection.assert_awaited_once_with(tmp_path)
        dispatcher.present_chooser.assert_not_called()

    @pytest.mark.asyncio
    async def test_orphaned_pending_entry_is_not_shared(
        self, opener, catalog, storage_root, channel
    ):
        folder = storage_root / "Documents" / "MediaBridge"
        write_file(folder / "done.pdf", b"done", 1_700_000_000)
        entry_id = await catalog.insert_pending_entry(
            "half.pdf", "application/pdf", "Documents/MediaBridge", "files"
        )
        with catalog.open_write_channel(entry_id) as sink:
            sink.write(b"ha")

        outcome = await opener.open_folder(str(folder))
        await channel.drain()

        assert outcome.message == "File shared: done.pdf"
        assert outcome.ticket.file_name == "done.pdf"

    @pytest.mark.asyncio
    async def test_missing_folder(self, opener, tmp_path, picker):
        with pytest.raises(DirectoryNotFoundError):
            await opener.open_folder(str(tmp_path / "missing"))
        picker.request_directory_selection.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["", "  "])
    async def test_empty_path(self, opener, path):
        with pytest.raises(InvalidInputError):
            await opener.open_folder(path)


class TestOpenFile:
    """Tests for FileOpener.open_file()."""

    @pytest.mark.asyncio
    async def test_shares_file(self, opener, tmp_path, dispatcher):
        target = write_file(tmp_path / "photo.jpg", b"jpg", 1_700_000_000)
        outcome = await opener.open_file(str(target))
        assert outcome.state == OpenState.SHARED
        assert outcome.ticket.mime_type == "image/jpeg"
        dispatcher.present_chooser.assert_called_once()

    @pytest.mark.asyncio
    async def test_missing_file(self, opener, tmp_path, dispatcher):
        with pytest.raises(SharedFileNotFoundError):
            await opener.open_file(str(tmp_path / "missing.jpg"))
        dispatcher.present_chooser.assert_not_called()
