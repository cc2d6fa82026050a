"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from saferm import __version__
from saferm.cli.commands import config, listing, purge, put
from saferm.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="saferm",
    help="A safer alternative to rm: move files to a recycle bin that empties itself.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"saferm version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route saferm log records to stderr; debug detail only when verbose."""
    logger = logging.getLogger("saferm")
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_time=False, show_path=False))


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """saferm - A safer alternative to rm.

    Moves files to a recycle bin (~/recycle by default) and permanently
    deletes them once they have expired.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="put")(put.put)
app.command(name="purge")(purge.purge)
app.command(name="list")(listing.list_items)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
