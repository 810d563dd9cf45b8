"""Utility modules for datrain.

This module exports commonly used utility functions.
"""

from datrain.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    printable,
)
from datrain.utils.shell import (
    CommandResult,
    CommandRunner,
    command_exists,
    run_command,
    run_guarded,
)

__all__ = [
    "CommandResult",
    "CommandRunner",
    "command_exists",
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "printable",
    "run_command",
    "run_guarded",
]
