"""Put command for moving files into the recycle bin.

Every invocation also performs maintenance: the database is reconciled
with the recycle directory and expired items are purged before the new
paths are staged.
"""

from pathlib import Path
from typing import Annotated

import typer

from saferm.cli.display import make_confirmer, print_report
from saferm.cli.types import (
    DaysOption,
    RecycleDirOption,
    SafeModeOption,
    YesOption,
    build_context,
    resolve_config,
)
from saferm.recycle.errors import FatalRecycleError
from saferm.recycle.models import RunContext, RunReport
from saferm.recycle.session import RecycleSession


def put(
    ctx: typer.Context,
    paths: Annotated[
        list[str] | None,
        typer.Argument(help="Files or directories to recycle.", show_default=False),
    ] = None,
    no_op: Annotated[
        bool,
        typer.Option(
            "--no-op",
            "-n",
            help="Run maintenance without recycling the given paths.",
        ),
    ] = False,
    recycle_dir: RecycleDirOption = None,
    days: DaysOption = None,
    safe: SafeModeOption = None,
    yes: YesOption = False,
) -> None:
    """Move files to the recycle bin.

    Items already in the recycle bin that are older than the retention
    window are permanently deleted first. Name conflicts are resolved by
    appending a counter, e.g. report.txt becomes report(1).txt.

    Examples:
        saferm put notes.txt build/
        saferm put --no-op          # Only purge expired items
    """
    config = resolve_config(recycle_dir, days, safe)
    context = build_context(config, no_op=no_op)
    run_recycle(ctx, config.recycle_dir, context, paths or [], yes)


def run_recycle(
    ctx: typer.Context,
    root: Path,
    context: RunContext,
    paths: list[str],
    assume_yes: bool,
) -> None:
    """Run the recycle bin pipeline and report the outcome.

    Exits with code 1 on a fatal error, or when any path could not be
    recycled or any expired item could not be deleted.
    """
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    session = RecycleSession(root, context, confirm=make_confirmer(root, assume_yes))
    report = RunReport()

    try:
        session.run(paths, report)
    except FatalRecycleError as e:
        report.fatal(str(e))
        print_report(report, quiet=quiet)
        raise typer.Exit(code=1) from e

    print_report(report, quiet=quiet)

    failed_stage = any(not r.success for r in report.staged)
    if failed_stage or report.purge_failed:
        raise typer.Exit(code=1)
