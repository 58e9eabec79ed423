"""
MediaBridge CLI Tool

Command-line interface for publishing files into shared storage and
handing files to the desktop share handler.

Usage:
    mediabridge save FILE            - Publish a file into shared storage
    mediabridge open-folder PATH     - Share the newest file in a folder
    mediabridge open-file PATH       - Share a file
    mediabridge info                 - Show resolved configuration
    mediabridge serve                - Start the HTTP bridge
"""
import asyncio
import logging
import mimetypes
import os
import subprocess
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mediabridge import __version__
from mediabridge.bridge import (
    OPEN_FILE,
    OPEN_FOLDER,
    SAVE_TO_PUBLIC_STORAGE,
    MethodCall,
    MethodResult,
    ResultStatus,
    create_bridge,
)
from mediabridge.config import Settings, get_settings
from mediabridge.storage.config import StorageConfig
from mediabridge.storage.service import StorageService

# Load environment variables
load_dotenv()

console = Console()


def _invoke(settings: Settings, channel: str, call: MethodCall) -> MethodResult:
    """Run one bridge call and wait for its external sends."""

    async def run() -> MethodResult:
        service = StorageService.from_config(StorageConfig.from_settings(settings))
        bridge = create_bridge(service, settings)
        try:
            return await bridge.invoke(channel, call)
        finally:
            await service.close()

    return asyncio.run(run())


def _report(result: MethodResult, title: str) -> None:
    """Print a result, exiting non-zero on failure."""
    if result.status == ResultStatus.SUCCESS:
        console.print(Panel(f"[green]✓[/green] {result.value}", title=title, border_style="green"))
        return
    if result.status == ResultStatus.NOT_IMPLEMENTED:
        console.print(f"[red]✗ {title}: not implemented[/red]")
        sys.exit(2)
    console.print(f"[red]✗ {result.error.code}[/red]: {result.error.message}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="MediaBridge")
@click.option("--api-level", type=int, default=None, help="Override PLATFORM_API_LEVEL")
@click.option("--root", type=click.Path(path_type=Path), default=None, help="Override PUBLIC_STORAGE_ROOT")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, api_level: int | None, root: Path | None, verbose: bool):
    """
    MediaBridge - publish files into shared storage and share them.
    """
    overrides = {}
    if api_level is not None:
        overrides["PLATFORM_API_LEVEL"] = api_level
    if root is not None:
        overrides["PUBLIC_STORAGE_ROOT"] = root
    settings = get_settings().model_copy(update=overrides) if overrides else get_settings()
    logging.basicConfig(
        level="DEBUG" if verbose else settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--name", default=None, help="File name in shared storage (default: source name)")
@click.option("--mime-type", default=None, help="Mime type (default: guessed from extension)")
@click.option("--subfolder", default=None, help="Subfolder below the app folder")
@click.pass_obj
def save(settings: Settings, file: Path, name: str | None, mime_type: str | None, subfolder: str | None):
    """
    Publish FILE into shared storage.

    Example:
        mediabridge save report.pdf --subfolder Invoices
    """
    if mime_type is None:
        mime_type = mimetypes.guess_type(file.name)[0] or "application/octet-stream"
    arguments = {
        "fileName": name or file.name,
        "mimeType": mime_type,
        "subfolder": subfolder,
        "bytes": file.read_bytes(),
    }
    result = _invoke(
        settings,
        settings.media_store_channel,
        MethodCall(method=SAVE_TO_PUBLIC_STORAGE, arguments=arguments),
    )
    _report(result, "Saved")


@main.command("open-folder")
@click.argument("path")
@click.pass_obj
def open_folder(settings: Settings, path: str):
    """
    Share the newest file in PATH, or open a folder picker.

    Example:
        mediabridge open-folder ~/Documents/MediaBridge
    """
    result = _invoke(
        settings,
        settings.file_manager_channel,
        MethodCall(method=OPEN_FOLDER, arguments={"path": path}),
    )
    _report(result, "Open folder")


@main.command("open-file")
@click.argument("path")
@click.pass_obj
def open_file(settings: Settings, path: str):
    """
    Share the file at PATH.

    Example:
        mediabridge open-file ~/Documents/MediaBridge/report.pdf
    """
    result = _invoke(
        settings,
        settings.file_manager_channel,
        MethodCall(method=OPEN_FILE, arguments={"path": path}),
    )
    _report(result, "Open file")


@main.command()
@click.pass_obj
def info(settings: Settings):
    """
    Show the resolved storage configuration.
    """
    config = StorageConfig.from_settings(settings)
    table = Table(title="MediaBridge configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Storage root", str(config.root))
    table.add_row("App namespace", config.app_namespace or "-")
    table.add_row("API level", str(config.api_level))
    table.add_row("Write protocol", "indirect" if config.uses_scoped_storage else "direct")
    table.add_row("Share reference", "content" if config.uses_share_provider else "file")
    table.add_row("Media store channel", settings.media_store_channel)
    table.add_row("File manager channel", settings.file_manager_channel)
    console.print(table)


@main.command()
@click.option("--port", default=8000, help="Port to run server on")
@click.pass_obj
def serve(settings: Settings, port: int):
    """
    Start the HTTP bridge.

    Example:
        mediabridge serve --port 8000
    """
    console.print(Panel(
        f"[bold green]Starting MediaBridge[/bold green]\n\n"
        f"API Docs: [cyan]http://localhost:{port}/docs[/cyan]\n\n"
        f"[dim]Press Ctrl+C to stop[/dim]",
        border_style="green"
    ))
    cmd = [sys.executable, "-m", "uvicorn", "mediabridge.main:app", f"--port={port}"]
    # The server process rebuilds its settings from the environment
    env = {
        **os.environ,
        "PUBLIC_STORAGE_ROOT": str(settings.PUBLIC_STORAGE_ROOT),
        "PLATFORM_API_LEVEL": str(settings.PLATFORM_API_LEVEL),
    }
    try:
        subprocess.run(cmd, env=env)
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped.[/yellow]")


if __name__ == "__main__":
    main()
