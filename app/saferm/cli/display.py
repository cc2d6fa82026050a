"""Shared Rich display functions for recycle bin runs.

Provides reusable printers for run events, the purge confirmation
prompt, and the table of staged items.
"""

from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from saferm.recycle.database import RecordMapping
from saferm.recycle.expiration import Confirmer
from saferm.recycle.models import SECONDS_PER_DAY, EventKind, RunReport
from saferm.utils.formatting import (
    console,
    err_console,
    format_duration,
    format_timestamp,
)


def print_report(report: RunReport, quiet: bool = False) -> None:
    """Print every event of a run.

    Warnings and fatal errors always go to stderr; info events are
    suppressed when quiet.

    Args:
        report: Report of the finished run.
        quiet: Suppress informational events.
    """
    for event in report.events:
        message = escape(event.message)
        if event.kind == EventKind.FATAL:
            err_console.print(f"[error]error:[/] {message}")
        elif event.kind == EventKind.WARNING:
            err_console.print(f"[warning]warning:[/] {message}")
        elif not quiet:
            console.print(f"[info]info:[/] {message}")


def make_confirmer(root: Path, assume_yes: bool = False) -> Confirmer:
    """Build the batch confirmation callback used in safe mode.

    Lists every item scheduled for deletion, then asks once for the
    whole batch.

    Args:
        root: Recycle directory, used to show full paths.
        assume_yes: Approve without prompting.

    Returns:
        Callable taking the expired names and returning the decision.
    """

    def confirm(batch: list[str]) -> bool:
        for name in batch:
            err_console.print(
                f"[warning]warning:[/] file scheduled for deletion: {escape(str(root / name))}"
            )
        if assume_yes:
            return True
        return typer.confirm(
            f"Purge all {len(batch)} of the above item(s) from the recycle bin?",
            default=False,
        )

    return confirm


def create_items_table(mapping: RecordMapping, now: int, retention_days: int) -> Table:
    """Create a Rich table of staged items, oldest first.

    Args:
        mapping: Reconciled mapping of the recycle bin.
        now: Current Unix timestamp.
        retention_days: Retention window in days.

    Returns:
        Rich Table with name, arrival, age and time until purge.
    """
    table = Table(
        title="Recycle Bin",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Arrived", style="muted")
    table.add_column("Age", justify="right")
    table.add_column("Purge In", justify="right")

    window = retention_days * SECONDS_PER_DAY
    for record in sorted(mapping.records(), key=lambda r: (r.arrival_timestamp, r.name)):
        age = max(now - record.arrival_timestamp, 0)
        remaining = record.arrival_timestamp + window - now
        if remaining <= 0:
            purge_in = "[purged]expired[/]"
        elif remaining < SECONDS_PER_DAY:
            purge_in = f"[expiring]{format_duration(remaining)}[/]"
        else:
            purge_in = format_duration(remaining)

        table.add_row(
            f"[item.name]{escape(record.name)}[/]",
            format_timestamp(record.arrival_timestamp),
            format_duration(age),
            purge_in,
        )

    return table
