"""Tests for mediabridge.storage.service module.

Covers:
    - save() on both protocols, including the report.pdf scenario
    - component wiring from config
    - close() drains external sends
"""

from pathlib import Path

import pytest

from mediabridge.storage.backends.local import LocalContentCatalog
from mediabridge.storage.backends.system import SystemDirectoryPicker, SystemShareDispatcher
from mediabridge.storage.models import ContentCategory, StorageRequest
from mediabridge.storage.service import StorageService
from mediabridge.storage.writer import DirectWriteProtocol, IndirectWriteProtocol
from tests.utils.storage_helpers import NAMESPACE, make_config

PAYLOAD = b"%PDF-1.7 invoice 2024-05"


@pytest.fixture
def report_request():
    return StorageRequest.build(
        file_name="report.pdf",
        mime_type="application/pdf",
        subfolder="Invoices",
        payload=PAYLOAD,
    )


class TestFromConfig:
    """Tests for StorageService.from_config()."""

    def test_default_collaborators(self, storage_root):
        service = StorageService.from_config(make_config(storage_root))
        assert isinstance(service.catalog, LocalContentCatalog)
        assert isinstance(service.writer.protocol, IndirectWriteProtocol)
        assert isinstance(service.opener.handoff.dispatcher, SystemShareDispatcher)
        assert isinstance(service.opener.picker, SystemDirectoryPicker)

    def test_direct_protocol_on_old_levels(self, storage_root):
        service = StorageService.from_config(make_config(storage_root, api_level=28))
        assert isinstance(service.writer.protocol, DirectWriteProtocol)


class TestSave:
    """Tests for StorageService.save()."""

    def test_resolves_report_destination(self, make_service, report_request):
        destination = make_service().resolve(report_request)
        assert destination.category == ContentCategory.DOCUMENTS
        assert destination.relative_path == f"Documents/{NAMESPACE}/Invoices"

    @pytest.mark.asyncio
    async def test_report_scenario_indirect(self, make_service, report_request, catalog):
        artifact = await make_service(api_level=29).save(report_request)
        with catalog.open_read_channel(artifact.reference) as source:
            assert source.read() == PAYLOAD

    @pytest.mark.asyncio
    async def test_report_scenario_direct(self, make_service, report_request, storage_root):
        artifact = await make_service(api_level=28).save(report_request)
        path = Path(artifact.reference)
        assert path == (storage_root / "Documents" / NAMESPACE / "Invoices" / "report.pdf").resolve()
        assert path.read_bytes() == PAYLOAD

    @pytest.mark.asyncio
    async def test_image_goes_to_pictures(self, make_service, storage_root):
        request = StorageRequest.build("chart.png", "image/png", payload=b"\x89PNG")
        artifact = await make_service(api_level=28).save(request)
        assert Path(artifact.reference).parent == (storage_root / "Pictures" / NAMESPACE).resolve()

    @pytest.mark.asyncio
    async def test_close_drains_notifications(self, make_service, report_request, notifier):
        service = make_service(api_level=28)
        artifact = await service.save(report_request)
        await service.close()
        notifier.notify.assert_awaited_once_with(artifact.reference, "application/pdf")
        assert service.channel.in_flight == 0
