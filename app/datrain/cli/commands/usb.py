"""Removable USB device commands.

Provides commands to enumerate removable drives, move files on and off
them, and drive the external eject, format and imaging tools.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from datrain.cli.types import get_config, get_runner
from datrain.devices.models import DeviceActionResult, UsbDevice
from datrain.devices.usb import (
    copy_file_to_usb,
    create_bootable_usb,
    delete_file_from_usb,
    eject_usb,
    find_device,
    format_usb,
    has_enough_space,
    list_files_on_usb,
    list_usb_devices,
    probe_usb_write,
)
from datrain.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    printable,
)
from datrain.utils.shell import CommandRunner

app = typer.Typer(
    help="Manage removable USB drives.",
    no_args_is_help=True,
)

DeviceArg = Annotated[str, typer.Argument(help="Device ID or mount point (see 'usb list').")]


@app.command("list")
def list_devices(ctx: typer.Context) -> None:
    """List mounted removable drives."""
    run = get_runner(get_config(ctx))
    devices = list_usb_devices(run)

    if not devices:
        print_info("No USB devices detected.")
        return

    table = Table(
        title="Removable Drives",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Device", no_wrap=True)
    table.add_column("Mount Point")
    table.add_column("Label", style="muted")
    table.add_column("Free", justify="right", style="info")
    table.add_column("Total", justify="right", style="info")

    for device in devices:
        table.add_row(
            escape(device.device_id),
            escape(str(device.mount_point)),
            escape(device.label or "-"),
            format_size(device.free_space) if device.free_space is not None else "?",
            format_size(device.total_space) if device.total_space is not None else "?",
        )
    console.print(table)


@app.command("ls")
def list_files(ctx: typer.Context, device_name: DeviceArg) -> None:
    """List files in the root of a drive."""
    device = _require_device(device_name, get_runner(get_config(ctx)))

    try:
        items = list_files_on_usb(device)
    except OSError as e:
        print_error(f"Cannot list {device.mount_point}: {e}")
        raise typer.Exit(code=1) from e

    console.print(f"[bold_header]Files on {escape(device.device_id)}:[/]")
    for item in items:
        kind = "DIR " if item.is_dir else "FILE"
        console.out(f"[{kind}] {printable(item.name)}", highlight=False)


@app.command("copy")
def copy(
    ctx: typer.Context,
    device_name: DeviceArg,
    source: Annotated[Path, typer.Argument(help="File to copy onto the drive.")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Copy even if free space is unknown or too small."),
    ] = False,
) -> None:
    """Copy a file to the root of a drive."""
    device = _require_device(device_name, get_runner(get_config(ctx)))

    if not source.is_file():
        print_error(f"Not a file: {source}")
        raise typer.Exit(code=1)

    if not force and not has_enough_space(device, source):
        print_error(f"Not enough free space on {device.device_id} for {source.name}.")
        print_info("Use --force to try anyway.")
        raise typer.Exit(code=1)

    try:
        copied = copy_file_to_usb(device, source, console=console)
    except OSError as e:
        print_error(f"Copy failed: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Copied {source.name} to {device.mount_point} ({format_size(copied)}).")


@app.command("rm")
def remove(
    ctx: typer.Context,
    device_name: DeviceArg,
    file_name: Annotated[str, typer.Argument(help="Name of the file in the drive root.")],
) -> None:
    """Delete a file from the root of a drive."""
    device = _require_device(device_name, get_runner(get_config(ctx)))

    try:
        deleted = delete_file_from_usb(device, file_name)
    except OSError as e:
        print_error(f"Delete failed: {e}")
        raise typer.Exit(code=1) from e

    if not deleted:
        print_warning(f"File not found on {device.device_id}: {file_name}")
        raise typer.Exit(code=1)
    print_success(f"Deleted {file_name} from {device.device_id}.")


@app.command("probe")
def probe(ctx: typer.Context, device_name: DeviceArg) -> None:
    """Check that a drive is writable."""
    device = _require_device(device_name, get_runner(get_config(ctx)))

    try:
        probe_usb_write(device)
    except OSError as e:
        print_error(f"{device.device_id} is not writable: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"{device.device_id} is writable.")


@app.command("eject")
def eject(ctx: typer.Context, device_name: DeviceArg) -> None:
    """Safely eject a drive."""
    run = get_runner(get_config(ctx))
    device = _require_device(device_name, run)
    _report(eject_usb(device, run), f"Safely ejected {device.device_id}.")


@app.command("bootable")
def bootable(
    ctx: typer.Context,
    device_name: DeviceArg,
    image: Annotated[Path, typer.Argument(help="Disk image (e.g. ISO) to write.")],
) -> None:
    """Write a bootable disk image to a drive."""
    config = get_config(ctx)
    run = get_runner(config)
    device = _require_device(device_name, run)
    result = create_bootable_usb(device, image, config.usb.bootable_tool, run)
    _report(result, f"Bootable image written to {device.device_id}.")


@app.command("format")
def format_drive(
    ctx: typer.Context,
    device_name: DeviceArg,
    fs_type: Annotated[str, typer.Option("--fs", help="Filesystem type.")] = "FAT32",
    label: Annotated[str | None, typer.Option("--label", "-l", help="Volume label.")] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation prompt.")] = False,
) -> None:
    """Format a drive. All data on it is erased."""
    run = get_runner(get_config(ctx))
    device = _require_device(device_name, run)

    if not yes:
        confirmed = typer.confirm(
            f"Erase all data on {device.device_id} ({device.mount_point})?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    _report(format_usb(device, fs_type, label, run), f"Formatted {device.device_id}.")


# === Private helper functions ===


def _require_device(name: str, run: CommandRunner) -> UsbDevice:
    """Resolve a device argument or exit with an error."""
    device = find_device(list_usb_devices(run), name)
    if device is None:
        print_error(f"No removable device found: {name}")
        print_info("Run 'datrain usb list' to see detected devices.")
        raise typer.Exit(code=1)
    return device


def _report(result: DeviceActionResult, success_message: str) -> None:
    """Print a device action outcome, exiting 1 on failure."""
    if result.success:
        print_success(success_message)
        return
    print_error(result.error or "Unknown error")
    raise typer.Exit(code=1)
