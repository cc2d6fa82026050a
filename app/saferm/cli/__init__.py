"""CLI package for saferm.

This package contains the Typer application and all subcommands.
"""

from saferm.cli.main import app

__all__ = ["app"]
