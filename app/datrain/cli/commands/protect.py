"""Protect command implementation.

Restricts a file or directory to its owner.
"""

from pathlib import Path
from typing import Annotated

import typer

from datrain.explorer.operations import restrict_to_owner
from datrain.utils.formatting import print_error, print_success


def protect(
    path: Annotated[Path, typer.Argument(help="File or directory to protect.")],
) -> None:
    """Restrict a file or directory so only its owner can access it.

    Files become 0600 and directories 0700. Directory contents keep
    their current permissions.
    """
    try:
        mode = restrict_to_owner(path)
    except OSError as e:
        print_error(f"Cannot protect {path}: {e.strerror or e}")
        raise typer.Exit(code=1) from e

    print_success(f"Protected {path} (mode {mode:o}).")
