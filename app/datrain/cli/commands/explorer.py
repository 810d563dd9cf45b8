"""Explorer command implementation.

Starts the interactive file explorer shell.
"""

from pathlib import Path
from typing import Annotated

import typer

from datrain.cli.types import get_config
from datrain.explorer.dispatcher import HELP_LINE, Explorer
from datrain.explorer.session import ExplorerSession
from datrain.utils.formatting import console, print_error

app = typer.Typer(
    help="Start the interactive file explorer.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def explore(
    ctx: typer.Context,
    start: Annotated[
        Path | None,
        typer.Option(
            "--start",
            "-s",
            help="Directory to start in (default: current directory).",
        ),
    ] = None,
) -> None:
    """Start the interactive file explorer.

    Type commands at the prompt; ``help`` lists them and ``exit`` leaves.

    Examples:
        datrain explorer
        datrain explorer --start ~/Documents
    """
    if ctx.invoked_subcommand is not None:
        return

    config = get_config(ctx)

    try:
        session = ExplorerSession.start(start.expanduser() if start else None)
    except OSError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print(f"[muted]{HELP_LINE}[/]")
    Explorer(session, config.explorer).run()
