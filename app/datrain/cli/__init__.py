"""CLI package for datrain.

This package contains the Typer application and all subcommands.
"""

from datrain.cli.main import app

__all__ = ["app"]
