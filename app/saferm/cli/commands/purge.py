"""Purge command for recycle bin maintenance."""

import typer

from saferm.cli.commands.put import run_recycle
from saferm.cli.types import (
    DaysOption,
    RecycleDirOption,
    SafeModeOption,
    YesOption,
    build_context,
    resolve_config,
)


def purge(
    ctx: typer.Context,
    recycle_dir: RecycleDirOption = None,
    days: DaysOption = None,
    safe: SafeModeOption = None,
    yes: YesOption = False,
) -> None:
    """Permanently delete expired items from the recycle bin.

    Equivalent to `saferm put --no-op`.

    Examples:
        saferm purge
        saferm purge --days 7 --safe
    """
    config = resolve_config(recycle_dir, days, safe)
    context = build_context(config, no_op=True)
    run_recycle(ctx, config.recycle_dir, context, [], yes)
