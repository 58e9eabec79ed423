"""
Pytest configuration and fixtures for MediaBridge tests.

Every test gets its own shared storage root under ``tmp_path``; external
collaborators (share chooser, directory picker, media scanner) are
AsyncMocks so nothing is launched on the test machine.
"""
import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mediabridge.config import Settings
from mediabridge.storage.backends.base import DirectoryPicker, ReindexNotifier, ShareDispatcher
from mediabridge.storage.backends.local import LocalContentCatalog
from mediabridge.storage.dispatch import DispatchChannel
from mediabridge.storage.service import StorageService
from tests.utils.storage_helpers import NAMESPACE, make_config

logger = logging.getLogger(__name__)


# ============================================
# Test Fixtures
# ============================================

@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Empty shared storage root."""
    root = tmp_path / "shared"
    root.mkdir()
    return root


@pytest.fixture
def channel() -> DispatchChannel:
    return DispatchChannel()


@pytest.fixture
def catalog(storage_root: Path) -> LocalContentCatalog:
    return LocalContentCatalog(storage_root, provider_authority="com.test.app.fileprovider")


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock(spec=ReindexNotifier)


@pytest.fixture
def dispatcher() -> AsyncMock:
    return AsyncMock(spec=ShareDispatcher)


@pytest.fixture
def picker() -> AsyncMock:
    return AsyncMock(spec=DirectoryPicker)


@pytest.fixture
def test_settings(storage_root: Path) -> Settings:
    """Settings pointing at the temporary storage root."""
    return Settings(
        PUBLIC_STORAGE_ROOT=storage_root,
        APP_NAMESPACE=NAMESPACE,
        APP_ID="com.test.app",
        PLATFORM_API_LEVEL=29,
        DEBUG=True,
    )


@pytest.fixture
def make_service(storage_root, catalog, notifier, dispatcher, picker, channel):
    """Factory for a StorageService at a given API level with mocked collaborators."""

    def factory(api_level: int = 29) -> StorageService:
        return StorageService(
            config=make_config(storage_root, api_level=api_level),
            catalog=catalog,
            notifier=notifier,
            dispatcher=dispatcher,
            picker=picker,
            channel=channel,
        )

    return factory


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external handoff)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end scenarios through the method bridge"
    )
