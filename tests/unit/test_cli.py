"""Unit tests for the command-line interface.

Tests for mediabridge/cli.py using click's CliRunner. The desktop launcher
is replaced so nothing is opened on the test machine.

Run with:
    pytest tests/unit/test_cli.py -v
"""

import pytest
from click.testing import CliRunner

from mediabridge.cli import main
from tests.utils.storage_helpers import write_file


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def launched(monkeypatch):
    calls = []

    def fake_launch(target, wait=False, locate=False):
        calls.append(target)
        return 0

    monkeypatch.setattr("mediabridge.storage.backends.system.click.launch", fake_launch)
    return calls


@pytest.fixture
def source_pdf(tmp_path):
    return write_file(tmp_path / "src" / "report.pdf", b"%PDF-1.7", 1_700_000_000)


class TestSave:
    """Tests for `mediabridge save`."""

    def test_direct_save(self, runner, storage_root, source_pdf):
        result = runner.invoke(
            main,
            ["--root", str(storage_root), "--api-level", "28", "save", str(source_pdf), "--subfolder", "Invoices"],
        )
        assert result.exit_code == 0, result.output
        saved = storage_root / "Documents" / "MediaBridge" / "Invoices" / "report.pdf"
        assert saved.read_bytes() == b"%PDF-1.7"

    def test_indirect_save(self, runner, storage_root, source_pdf):
        result = runner.invoke(
            main, ["--root", str(storage_root), "--api-level", "29", "save", str(source_pdf)]
        )
        assert result.exit_code == 0, result.output
        assert "content://media/external/files/media/" in result.output
        assert (storage_root / "Documents" / "MediaBridge" / "report.pdf").exists()

    def test_unmounted_root_fails(self, runner, tmp_path, source_pdf):
        result = runner.invoke(
            main, ["--root", str(tmp_path / "missing"), "--api-level", "28", "save", str(source_pdf)]
        )
        assert result.exit_code == 1
        assert "SAVE_ERROR" in result.output


class TestOpen:
    """Tests for `mediabridge open-folder` and `mediabridge open-file`."""

    def test_open_file(self, runner, storage_root, source_pdf, launched):
        result = runner.invoke(main, ["--root", str(storage_root), "open-file", str(source_pdf)])
        assert result.exit_code == 0, result.output
        assert "File shared: report.pdf" in result.output
        assert launched == [str(source_pdf.resolve())]

    def test_open_file_missing(self, runner, storage_root, tmp_path, launched):
        result = runner.invoke(
            main, ["--root", str(storage_root), "open-file", str(tmp_path / "nope.pdf")]
        )
        assert result.exit_code == 1
        assert "FILE_NOT_FOUND" in result.output
        assert launched == []

    def test_open_empty_folder_prompts(self, runner, storage_root, tmp_path, launched):
        folder = tmp_path / "empty"
        folder.mkdir()
        result = runner.invoke(main, ["--root", str(storage_root), "open-folder", str(folder)])
        assert result.exit_code == 0, result.output
        assert "Folder picker opened" in result.output
        assert launched == [str(folder)]


class TestInfo:
    """Tests for `mediabridge info`."""

    def test_shows_protocol(self, runner, storage_root):
        result = runner.invoke(main, ["--root", str(storage_root), "--api-level", "28", "info"])
        assert result.exit_code == 0, result.output
        assert "direct" in result.output


class TestServe:
    """Tests for `mediabridge serve`."""

    def test_forwards_overrides_to_server(self, runner, storage_root, monkeypatch):
        calls = []

        def fake_run(cmd, env=None):
            calls.append((cmd, env))

        monkeypatch.setattr("mediabridge.cli.subprocess.run", fake_run)
        result = runner.invoke(
            main, ["--root", str(storage_root), "--api-level", "28", "serve", "--port", "9001"]
        )
        assert result.exit_code == 0, result.output
        cmd, env = calls[0]
        assert "--port=9001" in cmd
        assert env["PUBLIC_STORAGE_ROOT"] == str(storage_root)
        assert env["PLATFORM_API_LEVEL"] == "28"
