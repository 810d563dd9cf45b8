"""Removable device models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class UsbDevice:
    """A mounted removable storage device.

    Attributes:
        device_id: Identifier the OS uses for the device (e.g. "E:" or
            "/dev/sdb1"). Passed to external tools verbatim.
        mount_point: Directory the device's filesystem is mounted at.
        label: Volume label, None if the volume has none.
        total_space: Capacity in bytes, None if unknown.
        free_space: Free space in bytes, None if unknown.
    """

    device_id: str
    mount_point: Path
    label: str | None = None
    total_space: int | None = None
    free_space: int | None = None

    def __post_init__(self) -> None:
        """Validate device data after initialization."""
        if not self.device_id:
            msg = "Device ID cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class DeviceActionResult:
    """Result of an external device operation (eject, format, image write).

    Attributes:
        device_id: Device that was operated on.
        success: Whether the operation completed successfully.
        error: Error message if the operation failed, None otherwise.
    """

    device_id: str
    success: bool
    error: str | None = None
