#!/usr/bin/env python3
"""
Main CLI entry point for cmdpal
"""

from typing import Optional

import typer
from rich.table import Table

from cmdpal import __version__
from cmdpal.commands._helpers import open_store
from cmdpal.commands.recent import app as recent_app
from cmdpal.config.settings import get_env_info, validate_all_env_vars
from cmdpal.config.ui_config import get_loop, get_placeholder, set_loop
from cmdpal.error_handling import handle_error, setup_logging, warn_user
from cmdpal.exceptions import CmdpalError
from cmdpal.store import Snapshot, StoreContext
from cmdpal.utils.output import console

app = typer.Typer(
    name="cmdpal",
    help="Command palette state store and demo palette",
    no_args_is_help=True,
)
app.add_typer(recent_app, name="recent")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
):
    """
    cmdpal - keyboard-driven command palette

    [bold]Examples:[/bold]

    Open the demo palette:
        [cyan]cmdpal palette[/cyan]

    Show recent commands:
        [cyan]cmdpal recent list[/cyan]

    Check configuration:
        [cyan]cmdpal env[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    setup_logging(verbose=verbose, quiet=quiet)


@app.command()
def version():
    """Show cmdpal version"""
    typer.echo(f"cmdpal version {__version__}")


@app.command()
def env():
    """Show CMDPAL_* environment variables and whether they are valid"""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Default", style="dim")
    table.add_column("Description")

    for name, info in get_env_info().items():
        if not info["is_set"]:
            value = "[dim]unset[/dim]"
        elif info["valid"]:
            value = f"[green]{info['value']}[/green]"
        else:
            value = f"[red]{info['value']}[/red]"
        table.add_row(name, value, info["default"] or "", info["description"])

    console.print(table)

    errors = validate_all_env_vars()
    for error in errors:
        warn_user(error)
    if errors:
        raise typer.Exit(1)


@app.command()
def loop(
    enabled: Optional[bool] = typer.Option(
        None, "--on/--off", help="Wrap keyboard navigation at the ends of the list"
    ),
):
    """Show or set whether arrow keys wrap around in the palette"""
    if enabled is not None:
        set_loop(enabled)
    state = "on" if get_loop() else "off"
    console.print(f"Loop navigation is [cyan]{state}[/cyan]")


@app.command()
def palette(
    debug: bool = typer.Option(False, "--debug", help="Log store diagnostics to tui_debug.log"),
):
    """Open the demo command palette"""
    from cmdpal.ui.command_palette.demo import build_demo_registry, similarity
    from cmdpal.ui.command_palette.palette_screen import PaletteApp
    from cmdpal.utils.logging_utils import setup_tui_logging

    logger = setup_tui_logging(__name__, debug=debug)

    try:
        store = open_store(initial=Snapshot(loop=get_loop()))
    except CmdpalError as e:
        handle_error(e, "open palette")

    logger.info("Starting command palette")
    PaletteApp(
        StoreContext(store),
        build_demo_registry(),
        scorer=similarity,
        placeholder=get_placeholder(),
    ).run()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
