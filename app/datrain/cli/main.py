"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from datrain import __version__
from datrain.cli.commands import config, explorer, protect, sync, usb

# Create main Typer app
app = typer.Typer(
    name="datrain",
    help="Interactive file explorer with USB and cloud-folder helpers.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"datrain version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: ~/.config/datrain/config.toml).",
        ),
    ] = None,
) -> None:
    """datrain - interactive file explorer.

    Browse and manage files from an interactive shell, move files onto
    removable drives and mirror folders into OneDrive.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path


# Register commands
app.add_typer(explorer.app, name="explorer")
app.add_typer(usb.app, name="usb")
app.add_typer(sync.app, name="sync")
app.add_typer(config.app, name="config")
app.command(name="protect")(protect.protect)


if __name__ == "__main__":
    app()
