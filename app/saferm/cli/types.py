"""Shared types and utilities for CLI commands.

This module provides the options common to every command that opens
the recycle bin, and the helpers that turn them into a run context.
"""

from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

from saferm.core.config import ConfigError, SafermConfig, load_config
from saferm.recycle.models import RunContext
from saferm.utils.formatting import print_error

RecycleDirOption = Annotated[
    Path | None,
    typer.Option(
        "--dir",
        "-d",
        help="Recycle bin directory (overrides config).",
    ),
]

DaysOption = Annotated[
    int | None,
    typer.Option(
        "--days",
        min=0,
        help="Days before items are purged (overrides config).",
    ),
]

SafeModeOption = Annotated[
    bool | None,
    typer.Option(
        "--safe/--unsafe",
        help="Confirm before purging expired items (overrides config).",
        show_default=False,
    ),
]

YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip the purge confirmation prompt."),
]


def now_timestamp() -> int:
    """Current Unix timestamp in whole seconds."""
    return int(datetime.now(UTC).timestamp())


def resolve_config(
    recycle_dir: Path | None = None,
    days: int | None = None,
    safe: bool | None = None,
) -> SafermConfig:
    """Load the config file and apply command-line overrides.

    Exits with code 1 when the configuration is invalid.
    """
    try:
        return load_config().with_overrides(
            retention_days=days,
            safe_mode=safe,
            recycle_dir=recycle_dir.expanduser() if recycle_dir is not None else None,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def build_context(config: SafermConfig, *, no_op: bool = False) -> RunContext:
    """Create the run context for this invocation."""
    return RunContext(
        now=now_timestamp(),
        retention_days=config.retention_days,
        safe_mode=config.safe_mode,
        no_op=no_op,
    )
