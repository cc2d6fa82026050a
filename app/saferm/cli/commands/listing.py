"""List command for showing the contents of the recycle bin.

Listing reconciles the database with the recycle directory (and saves
the result) but never purges or stages anything.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from saferm.cli.display import create_items_table
from saferm.cli.types import DaysOption, RecycleDirOption, build_context, resolve_config
from saferm.recycle.database import RecordMapping
from saferm.recycle.errors import FatalRecycleError
from saferm.recycle.models import SECONDS_PER_DAY, RunContext
from saferm.recycle.session import RecycleSession
from saferm.utils.formatting import console, print_error, print_info


class OutputFormat(str, Enum):
    """Output format options for the recycle bin listing."""

    TABLE = "table"
    JSON = "json"


def list_items(
    recycle_dir: RecycleDirOption = None,
    days: DaysOption = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show items in the recycle bin and when they will be purged.

    Examples:
        saferm list
        saferm list --format json
    """
    config = resolve_config(recycle_dir, days)
    context = build_context(config, no_op=True)

    try:
        mapping = RecycleSession(config.recycle_dir, context).inspect()
    except FatalRecycleError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        _print_json(mapping, context)
        return

    if not len(mapping):
        print_info(f"Recycle bin is empty: {config.recycle_dir}")
        return

    console.print(create_items_table(mapping, context.now, config.retention_days))
    console.print(
        f"\n[dim]{len(mapping)} item(s) in {config.recycle_dir}, "
        f"kept for {config.retention_days} day(s)[/dim]"
    )


def _print_json(mapping: RecordMapping, context: RunContext) -> None:
    """Display the recycle bin contents as JSON."""
    window = context.retention_days * SECONDS_PER_DAY
    cutoff = context.expiry_cutoff
    data = [
        {
            "name": record.name,
            "arrival_timestamp": record.arrival_timestamp,
            "expires_at": record.arrival_timestamp + window,
            "expired": record.arrival_timestamp <= cutoff,
        }
        for record in sorted(mapping.records(), key=lambda r: (r.arrival_timestamp, r.name))
    ]
    console.print_json(json.dumps(data))
