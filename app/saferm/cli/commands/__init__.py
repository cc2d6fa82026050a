"""CLI commands for saferm.

This package contains all subcommand implementations.
"""

from saferm.cli.commands import config, listing, purge, put

__all__ = ["config", "listing", "purge", "put"]
