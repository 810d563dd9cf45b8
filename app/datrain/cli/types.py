"""Shared helpers for CLI commands.

Configuration loading and command-runner construction used by several
command modules.
"""

from functools import partial

import typer

from datrain.core.config import ConfigError, DatrainConfig, load_config
from datrain.utils.formatting import print_error
from datrain.utils.shell import CommandRunner, run_command


def get_config(ctx: typer.Context) -> DatrainConfig:
    """Load the configuration selected by the global ``--config`` option.

    Exits with code 1 if the file exists but is invalid.
    """
    obj = ctx.obj or {}
    try:
        return load_config(obj.get("config_path"))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_runner(config: DatrainConfig) -> CommandRunner:
    """Build the command runner for external device tools."""
    return partial(run_command, timeout=float(config.usb.command_timeout))
