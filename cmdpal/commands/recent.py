"""Recent-command history commands for cmdpal.

All commands live under `cmdpal recent <subcommand>` and go through the same
store facade the palette uses, so the list is capped and de-duplicated
exactly as it is in the UI.
"""

import typer
from rich.table import Table

from cmdpal.error_handling import safe_operation
from cmdpal.exceptions import StorageError
from cmdpal.utils.output import console, print_json

from ._helpers import open_store, run_async

app = typer.Typer(help="Manage the recent-commands history")


async def _load() -> list[str]:
    store = open_store()
    await store.init()
    return list(store.get_state().recent_commands)


async def _add(command_id: str) -> list[str]:
    store = open_store()
    await store.init()
    await store.add_recent_command(command_id)
    await store.flush()

    # The save runs in the background and never raises; read it back to confirm
    saved = await store.persistence.load_recent()
    if not saved or saved[0] != command_id:
        raise StorageError("Recent command was not saved", command_id=command_id)
    return list(store.get_state().recent_commands)


async def _clear() -> int:
    store = open_store()
    await store.init()
    count = len(store.get_state().recent_commands)
    store.set_state({"recent_commands": []})
    if not await store.persistence.save_recent([]):
        raise StorageError("Failed to clear recent commands")
    return count


@app.command("list")
@safe_operation("list recent commands")
def list_recent(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show recently executed command ids, most recent first"""
    ids = run_async(_load())

    if json_output:
        print_json(ids)
        return

    if not ids:
        console.print("[yellow]No recent commands[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Command", style="cyan")
    for position, command_id in enumerate(ids, start=1):
        table.add_row(str(position), command_id)
    console.print(table)


@app.command("add")
@safe_operation("add recent command")
def add_recent(
    command_id: str = typer.Argument(..., help="Command id to move to the front"),
):
    """Record a command as the most recently executed"""
    ids = run_async(_add(command_id))
    console.print(f"[green]✓ Remembered[/green] [cyan]{command_id}[/cyan] ({len(ids)} recent)")


@app.command("clear")
@safe_operation("clear recent commands")
def clear_recent(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Forget every recent command"""
    if not force and not typer.confirm("Clear the recent-commands history?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    count = run_async(_clear())
    console.print(f"[green]✓ Cleared {count} recent command(s)[/green]")
