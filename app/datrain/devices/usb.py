"""Removable USB device helpers.

Device enumeration, ejection, formatting and bootable-image writing are
delegated to external programs through an injectable command runner; only
their exit status (and, for enumeration, their tabular output) is
inspected. File transfer, listing and the write probe operate on the
device's mount point directly.
"""

import logging
import re
import sys
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from datrain.devices.models import DeviceActionResult, UsbDevice
from datrain.explorer.models import FileItem
from datrain.explorer.operations import COPY_BUFFER_SIZE
from datrain.explorer.traversal import iter_listing
from datrain.utils.shell import CommandResult, CommandRunner, run_command, run_guarded

logger = logging.getLogger(__name__)

WMIC_QUERY: list[str] = [
    "wmic",
    "logicaldisk",
    "where",
    "DriveType=2",
    "get",
    "DeviceID,VolumeName,Size,FreeSpace",
    "/format:csv",
]

LSBLK_QUERY: list[str] = [
    "lsblk",
    "--bytes",
    "--raw",
    "--noheadings",
    "-o",
    "PATH,LABEL,SIZE,FSAVAIL,MOUNTPOINT,RM",
]

_LSBLK_COLUMNS = 6
_LSBLK_ESCAPE = re.compile(r"\\x([0-9a-fA-F]{2})")

WRITE_PROBE_NAME = "test_write.txt"

_EJECT_SCRIPT = """
$usb = Get-WmiObject -Class Win32_LogicalDisk | Where-Object {{$_.DeviceID -eq '{device_id}'}}
if ($usb) {{
    $shell = New-Object -ComObject Shell.Application
    $shell.Namespace(17).ParseName($usb.DeviceID).InvokeVerb("Eject")
}}
"""


def _is_windows(platform: str) -> bool:
    return platform.startswith("win")


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_wmic_csv(output: str) -> list[UsbDevice]:
    """Parse ``wmic ... /format:csv`` output into devices.

    The first non-blank line is the header; columns are located by name
    because wmic orders them alphabetically regardless of the query.
    Rows shorter than the header or without a device ID are skipped.

    Args:
        output: Raw stdout of the wmic query.

    Returns:
        Devices in output order (mount points not checked).
    """
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    if not lines:
        return []

    header = [column.strip() for column in lines[0].split(",")]
    if "DeviceID" not in header:
        logger.warning("Unexpected wmic header: %s", lines[0])
        return []
    index = {name: i for i, name in enumerate(header)}

    def column(fields: list[str], name: str) -> str:
        i = index.get(name)
        return fields[i].strip() if i is not None else ""

    devices: list[UsbDevice] = []
    for line in lines[1:]:
        fields = line.split(",")
        if len(fields) < len(header):
            logger.debug("Skipping short wmic row: %r", line)
            continue
        device_id = column(fields, "DeviceID")
        if not device_id:
            continue
        devices.append(
            UsbDevice(
                device_id=device_id,
                mount_point=Path(device_id),
                label=column(fields, "VolumeName") or None,
                total_space=_parse_int(column(fields, "Size")),
                free_space=_parse_int(column(fields, "FreeSpace")),
            )
        )
    return devices


def _unescape_lsblk(value: str) -> str:
    return _LSBLK_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), value)


def parse_lsblk_raw(output: str) -> list[UsbDevice]:
    """Parse ``lsblk --raw`` output into removable, mounted devices.

    Raw mode separates columns with single spaces, leaves empty columns
    empty and escapes blanks inside values as ``\\x20``. Rows with the
    wrong column count, non-removable devices and unmounted devices are
    skipped.

    Args:
        output: Raw stdout of the lsblk query.

    Returns:
        Devices in output order (mount points not checked).
    """
    devices: list[UsbDevice] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split(" ")
        if len(fields) != _LSBLK_COLUMNS:
            logger.debug("Skipping malformed lsblk row: %r", line)
            continue
        path, label, size, avail, mountpoint, removable = (_unescape_lsblk(f) for f in fields)
        if removable.strip() != "1" or not mountpoint or not path:
            continue
        devices.append(
            UsbDevice(
                device_id=path,
                mount_point=Path(mountpoint),
                label=label or None,
                total_space=_parse_int(size),
                free_space=_parse_int(avail),
            )
        )
    return devices


def list_usb_devices(
    run: CommandRunner = run_command,
    platform: str = sys.platform,
) -> list[UsbDevice]:
    """Enumerate mounted removable drives.

    Uses wmic on Windows and lsblk elsewhere. Devices whose mount point
    does not exist are dropped.

    Args:
        run: Command runner used for the query.
        platform: Platform identifier (``sys.platform`` format).

    Returns:
        List of detected devices; empty if the query fails.
    """
    windows = _is_windows(platform)
    result = run_guarded(run, WMIC_QUERY if windows else LSBLK_QUERY)
    if not result.success:
        logger.warning("Device query failed: %s", result.stderr.strip())
        return []

    devices = parse_wmic_csv(result.stdout) if windows else parse_lsblk_raw(result.stdout)
    return [d for d in devices if d.mount_point.exists()]


def find_device(devices: list[UsbDevice], name: str) -> UsbDevice | None:
    """Look up a device by identifier or mount point."""
    for device in devices:
        if name in (device.device_id, str(device.mount_point)):
            return device
    return None


def has_enough_space(device: UsbDevice, file_path: Path) -> bool:
    """Check whether a file fits in the device's free space.

    Unknown free space counts as not enough.

    Raises:
        OSError: If the file cannot be stat-ed.
    """
    size = file_path.stat().st_size
    if device.free_space is None:
        return False
    return size < device.free_space


def copy_file_to_usb(
    device: UsbDevice,
    src: Path,
    console: Console | None = None,
    show_progress: bool = True,
) -> int:
    """Copy a file to the root of a device, reporting progress.

    Args:
        device: Target device.
        src: File to copy; keeps its name on the device.
        console: Console the progress bar renders on.
        show_progress: If False, no progress bar is shown.

    Returns:
        Number of bytes copied.

    Raises:
        OSError: If reading the source or writing the destination fails.
    """
    dest = device.mount_point / src.name
    total = src.stat().st_size
    transferred = 0

    with (
        open(src, "rb") as fsrc,
        open(dest, "wb") as fdst,
        Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=console,
            disable=not show_progress,
        ) as progress,
    ):
        task = progress.add_task(f"Copying {src.name}", total=total)
        while chunk := fsrc.read(COPY_BUFFER_SIZE):
            fdst.write(chunk)
            transferred += len(chunk)
            progress.update(task, advance=len(chunk))

    logger.info("Copied %s to %s (%d bytes)", src, dest, transferred)
    return transferred


def list_files_on_usb(device: UsbDevice) -> list[FileItem]:
    """List the top-level entries of a device (non-recursive).

    Raises:
        OSError: If the mount point cannot be enumerated.
    """
    errors: list[OSError] = []
    sections = list(iter_listing(device.mount_point, on_error=lambda _p, e: errors.append(e)))
    if not sections and errors:
        raise errors[0]
    return [item for section in sections for item in section.items]


def delete_file_from_usb(device: UsbDevice, file_name: str) -> bool:
    """Delete a plain file from the root of a device.

    Returns:
        True if the file was deleted, False if no such file exists.

    Raises:
        OSError: If the file exists but cannot be removed.
    """
    path = device.mount_point / file_name
    if not path.is_file():
        logger.info("File not found on %s: %s", device.device_id, path)
        return False
    path.unlink()
    return True


def probe_usb_write(device: UsbDevice) -> Path:
    """Verify a device is writable by writing and removing a probe file.

    Returns:
        Path of the probe file that was written and removed.

    Raises:
        OSError: If the probe cannot be written or removed.
    """
    probe = device.mount_point / WRITE_PROBE_NAME
    probe.write_bytes(b"USB write test successful.")
    probe.unlink()
    return probe


def _to_action_result(device_id: str, result: CommandResult, what: str) -> DeviceActionResult:
    if result.success:
        return DeviceActionResult(device_id=device_id, success=True)
    detail = result.stderr.strip() or f"exit status {result.returncode}"
    return DeviceActionResult(device_id=device_id, success=False, error=f"{what} failed: {detail}")


def eject_usb(
    device: UsbDevice,
    run: CommandRunner = run_command,
    platform: str = sys.platform,
) -> DeviceActionResult:
    """Safely eject a device.

    Windows uses a generated PowerShell Shell.Application script;
    elsewhere ``udisksctl power-off``.
    """
    if _is_windows(platform):
        # Single-quoted PowerShell literal: a quote is escaped by doubling it
        script = _EJECT_SCRIPT.format(device_id=device.device_id.replace("'", "''"))
        args = ["powershell", "-NoProfile", "-Command", script]
    else:
        args = ["udisksctl", "power-off", "-b", device.device_id]
    return _to_action_result(device.device_id, run_guarded(run, args), "Eject")


def format_usb(
    device: UsbDevice,
    fs_type: str,
    label: str | None = None,
    run: CommandRunner = run_command,
    platform: str = sys.platform,
) -> DeviceActionResult:
    """Format a device, erasing all data on it."""
    volume_label = label or "USB"
    if _is_windows(platform):
        args = [
            "format",
            device.device_id,
            f"/FS:{fs_type}",
            f"/V:{volume_label}",
            "/Q",
            "/Y",
        ]
    else:
        args = ["mkfs", "-t", fs_type, "-L", volume_label, device.device_id]
    return _to_action_result(device.device_id, run_guarded(run, args), "Format")


def create_bootable_usb(
    device: UsbDevice,
    image_path: Path,
    tool: str,
    run: CommandRunner = run_command,
) -> DeviceActionResult:
    """Write a bootable disk image to a device with an external imaging tool.

    The tool is invoked as ``<tool> <device_id> <image_path>``.
    """
    if not image_path.is_file():
        return DeviceActionResult(
            device_id=device.device_id,
            success=False,
            error=f"Image not found: {image_path}",
        )
    args = [tool, device.device_id, str(image_path)]
    return _to_action_result(device.device_id, run_guarded(run, args), "Bootable image write")
