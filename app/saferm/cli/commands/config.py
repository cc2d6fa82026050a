"""Config commands for viewing and creating the configuration file."""

from typing import Annotated

import typer
from rich.table import Table

from saferm.core.config import ConfigError, SafermConfig, load_config, save_config
from saferm.core.paths import get_config_path
from saferm.utils.formatting import console, print_error, print_success, print_warning

app = typer.Typer(
    help="View and initialize saferm configuration.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    path = get_config_path()
    try:
        config = load_config(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    source = str(path) if path.exists() else "defaults (no config file)"

    table = Table(
        title="Configuration",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("retention_days", str(config.retention_days))
    table.add_row("safe_mode", str(config.safe_mode).lower())
    table.add_row("recycle_dir", str(config.recycle_dir))

    console.print(table)
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the default settings."""
    path = get_config_path()
    if path.exists() and not force:
        print_warning(f"Config file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(SafermConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
