"""Tests for mediabridge.storage.share module.

Covers:
    - guess_mime_type
    - reference strategy selection by capability level
    - ShareHandoff.share_existing ticket contents and dispatch
"""

import pytest

from mediabridge.storage.errors import InvalidInputError, SharedFileNotFoundError
from mediabridge.storage.share import (
    CatalogShareReference,
    DirectShareReference,
    ShareHandoff,
    guess_mime_type,
    select_share_reference,
)
from tests.utils.storage_helpers import make_config


@pytest.mark.fast
class TestGuessMimeType:
    """Tests for guess_mime_type()."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("report.pdf", "application/pdf"),
            ("photo.PNG", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("backup.zzunknown", "*/*"),
            ("no_extension", "*/*"),
        ],
    )
    def test_lookup(self, name, expected):
        assert guess_mime_type(name) == expected


class TestSelectShareReference:
    """Tests for select_share_reference()."""

    @pytest.mark.parametrize("level", [24, 29, 34])
    def test_provider_levels_use_catalog(self, storage_root, catalog, level):
        config = make_config(storage_root, api_level=level)
        assert isinstance(select_share_reference(config, catalog), CatalogShareReference)

    @pytest.mark.parametrize("level", [19, 23])
    def test_older_levels_use_file_uri(self, storage_root, catalog, level):
        config = make_config(storage_root, api_level=level)
        assert isinstance(select_share_reference(config, catalog), DirectShareReference)


class TestShareExisting:
    """Tests for ShareHandoff.share_existing()."""

    @pytest.fixture
    def shared_file(self, storage_root):
        path = storage_root / "Documents" / "MediaBridge" / "backup.pdf"
        path.parent.mkdir(parents=True)
        path.write_bytes(b"%PDF")
        return path

    def _handoff(self, storage_root, catalog, dispatcher, channel, api_level=29):
        config = make_config(storage_root, api_level=api_level)
        return ShareHandoff.for_config(config, catalog, dispatcher, channel)

    @pytest.mark.asyncio
    async def test_ticket_with_content_reference(
        self, storage_root, catalog, dispatcher, channel, shared_file
    ):
        handoff = self._handoff(storage_root, catalog, dispatcher, channel)
        ticket = await handoff.share_existing(shared_file)

        assert ticket.reference.startswith("content://com.test.app.fileprovider/root/")
        assert ticket.mime_type == "application/pdf"
        assert ticket.subject == "Backup - backup.pdf"
        assert ticket.body == "File exported from MediaBridge"
        assert ticket.chooser_title == "Share file"
        assert ticket.grant_read
        assert ticket.file_name == "backup.pdf"

    @pytest.mark.asyncio
    async def test_ticket_with_file_uri(
        self, storage_root, catalog, dispatcher, channel, shared_file
    ):
        handoff = self._handoff(storage_root, catalog, dispatcher, channel, api_level=23)
        ticket = await handoff.share_existing(str(shared_file))
        assert ticket.reference == shared_file.resolve().as_uri()

    @pytest.mark.asyncio
    async def test_dispatches_without_waiting(
        self, storage_root, catalog, dispatcher, channel, shared_file
    ):
        handoff = self._handoff(storage_root, catalog, dispatcher, channel)
        ticket = await handoff.share_existing(shared_file)

        dispatcher.present_chooser.assert_called_once_with(ticket)
        await channel.drain()
        dispatcher.present_chooser.assert_awaited_once_with(ticket)

    @pytest.mark.asyncio
    async def test_dispatch_failure_is_not_raised(
        self, storage_root, catalog, dispatcher, channel, shared_file
    ):
        dispatcher.present_chooser.side_effect = RuntimeError("no handler")
        handoff = self._handoff(storage_root, catalog, dispatcher, channel)
        ticket = await handoff.share_existing(shared_file)
        await channel.drain()
        assert ticket.file_name == "backup.pdf"

    @pytest.mark.asyncio
    async def test_missing_file_is_not_dispatched(
        self, storage_root, catalog, dispatcher, channel
    ):
        handoff = self._handoff(storage_root, catalog, dispatcher, channel)
        with pytest.raises(SharedFileNotFoundError, match="does not exist"):
            await handoff.share_existing(storage_root / "missing.pdf")
        dispatcher.present_chooser.assert_not_called()
        assert channel.in_flight == 0

    @pytest.mark.asyncio
    async def test_empty_path(self, storage_root, catalog, dispatcher, channel):
        handoff = self._handoff(storage_root, catalog, dispatcher, channel)
        with pytest.raises(InvalidInputError):
            await handoff.share_existing("")
