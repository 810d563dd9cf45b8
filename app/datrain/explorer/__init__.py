"""Interactive file explorer.

This module provides the explorer's metadata snapshot, traversal and
mutation primitives, session state and the command dispatcher.
"""

from datrain.explorer.dispatcher import Explorer, describe_os_error
from datrain.explorer.models import Command, FileItem, ListingSection, parse_command
from datrain.explorer.session import ExplorerSession

__all__ = [
    "Command",
    "Explorer",
    "ExplorerSession",
    "FileItem",
    "ListingSection",
    "describe_os_error",
    "parse_command",
]
