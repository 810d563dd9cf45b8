"""Sync commands.

Mirrors a local folder into OneDrive and caches new downloads.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from datrain.cli.types import get_config
from datrain.core.paths import get_default_download_cache_dir, get_default_downloads_dir
from datrain.sync.downloads import cache_downloads
from datrain.sync.models import CacheResult, CacheStatus, SyncResult
from datrain.sync.onedrive import find_sync_folder, mirror_to_sync_folder, write_sync_probe
from datrain.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Mirror folders into OneDrive and cache downloads.",
    no_args_is_help=True,
)

_STATUS_STYLES: dict[CacheStatus, str] = {
    CacheStatus.CACHED: "success",
    CacheStatus.ALREADY_CACHED: "muted",
    CacheStatus.MALICIOUS: "error",
    CacheStatus.UNDETERMINED: "warning",
    CacheStatus.FAILED: "error",
}


@app.command()
def onedrive(
    ctx: typer.Context,
    source: Annotated[
        Path | None,
        typer.Option("--source", "-s", help="Directory whose files are mirrored."),
    ] = None,
    target: Annotated[
        Path | None,
        typer.Option("--target", "-t", help="OneDrive folder (default: detected)."),
    ] = None,
    probe: Annotated[
        bool,
        typer.Option("--probe", help="Also write a test file into the OneDrive folder."),
    ] = False,
) -> None:
    """Copy the plain files of a folder into OneDrive.

    Subfolders are skipped. The OneDrive client uploads the copies if it
    is running.
    """
    config = get_config(ctx)

    sync_folder = find_sync_folder(target or config.sync.target_dir)
    if sync_folder is None:
        print_error("Could not locate the OneDrive folder. Is OneDrive installed and set up?")
        raise typer.Exit(code=1)

    source_dir = (source or Path(config.sync.source_dir)).expanduser()
    if not source_dir.is_dir():
        print_error(f"Source directory does not exist: {source_dir}")
        print_info("Place files to sync to OneDrive there, or pass --source.")
        raise typer.Exit(code=1)

    try:
        results = mirror_to_sync_folder(source_dir, sync_folder)
    except OSError as e:
        print_error(f"Failed to read source directory: {e}")
        raise typer.Exit(code=1) from e

    if probe:
        try:
            probe_path = write_sync_probe(sync_folder)
        except OSError as e:
            print_error(f"Failed to write probe file: {e}")
            raise typer.Exit(code=1) from e
        print_info(f"Probe file written: {probe_path}")

    _print_sync_results(results)
    print_info("OneDrive uploads the files automatically if its client is running.")

    if any(not r.success for r in results):
        raise typer.Exit(code=1)


@app.command()
def downloads(
    ctx: typer.Context,
    downloads_dir: Annotated[
        Path | None,
        typer.Option("--downloads", "-d", help="Directory to read new downloads from."),
    ] = None,
    cache_dir: Annotated[
        Path | None,
        typer.Option("--cache", help="Directory to cache downloads into."),
    ] = None,
) -> None:
    """Cache new downloads, vetting them with the configured detector."""
    config = get_config(ctx)

    source = downloads_dir or _configured_path(config.sync.downloads_dir)
    source = source or get_default_downloads_dir()
    dest = cache_dir or _configured_path(config.sync.cache_dir) or get_default_download_cache_dir()

    if not source.is_dir():
        print_error(f"Downloads directory does not exist: {source}")
        raise typer.Exit(code=1)

    try:
        results = cache_downloads(source, dest, config.sync.detector)
    except OSError as e:
        print_error(f"Download caching failed: {e}")
        raise typer.Exit(code=1) from e

    _print_cache_results(results)

    if any(r.status == CacheStatus.FAILED for r in results):
        raise typer.Exit(code=1)


# === Private helper functions ===


def _configured_path(value: str | None) -> Path | None:
    return Path(value).expanduser() if value else None


def _print_sync_results(results: list[SyncResult]) -> None:
    """Display per-file mirroring outcomes and a summary."""
    if not results:
        print_info("No files to sync.")
        return

    for result in results:
        source = escape(str(result.source))
        if result.success:
            console.print(f"[success]OK[/]   {source} -> {escape(str(result.destination))}")
        else:
            console.print(f"[error]FAIL[/] {source}: {escape(result.error or '')}")

    failed = sum(1 for r in results if not r.success)
    if failed == 0:
        print_success(f"All {len(results)} file(s) copied to OneDrive.")
    else:
        console.print(
            f"\n[success]{len(results) - failed} copied[/success], [error]{failed} failed[/error]"
        )


def _print_cache_results(results: list[CacheResult]) -> None:
    """Display download cache outcomes as a table."""
    if not results:
        print_info("No downloads found.")
        return

    table = Table(
        title="Download Cache",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("File", no_wrap=True)
    table.add_column("Status", width=14)
    table.add_column("Detail", style="muted")

    for result in results:
        style = _STATUS_STYLES[result.status]
        table.add_row(
            escape(result.name),
            f"[{style}]{result.status.value}[/{style}]",
            escape(result.error or ""),
        )
    console.print(table)

    cached = sum(1 for r in results if r.status == CacheStatus.CACHED)
    print_info(f"{cached} new file(s) cached.")
