"""CLI commands for datrain.

This package contains all subcommand implementations.
"""

from datrain.cli.commands import config, explorer, protect, sync, usb

__all__ = ["config", "explorer", "protect", "sync", "usb"]
