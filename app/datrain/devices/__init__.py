"""Removable device module.

This module provides USB device enumeration, file transfer and the
external-tool wrappers for ejecting, formatting and imaging devices.
"""

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

__all__ = [
    "DeviceActionResult",
    "UsbDevice",
    "copy_file_to_usb",
    "create_bootable_usb",
    "delete_file_from_usb",
    "eject_usb",
    "find_device",
    "format_usb",
    "has_enough_space",
    "list_files_on_usb",
    "list_usb_devices",
    "probe_usb_write",
]
