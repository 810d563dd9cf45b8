"""Config commands.

Show, create and locate the datrain configuration file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from datrain.cli.types import get_config
from datrain.core.config import ConfigError, DatrainConfig, config_to_dict, save_config
from datrain.core.paths import get_config_path
from datrain.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize configuration.",
    no_args_is_help=True,
)


def _selected_path(ctx: typer.Context) -> Path:
    obj = ctx.obj or {}
    return obj.get("config_path") or get_config_path()


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as TOML."""
    config = get_config(ctx)
    path = _selected_path(ctx)
    source = str(path) if path.exists() else "built-in defaults"
    console.print(f"[muted]# {source}[/]")
    console.out(tomli_w.dumps(config_to_dict(config)), highlight=False)


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file populated with the defaults."""
    path = _selected_path(ctx)

    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(DatrainConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command("path")
def show_path(ctx: typer.Context) -> None:
    """Print the config file location."""
    console.out(str(_selected_path(ctx)), highlight=False)
