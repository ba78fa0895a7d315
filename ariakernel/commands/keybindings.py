"""Keybinding inspection commands for ariakernel."""

from typing import Optional

import typer
from rich.table import Table

from ..config.constants import GLOBAL_SCOPE
from ..keybindings import ConflictSeverity, Keymap, register_os_defaults
from ..keybindings.config import KeybindingConfig, get_config_path, save_example_config
from ..utils.output import console, print_json

app = typer.Typer()


def build_keymap() -> Keymap:
    """OS defaults with the user's keybindings.yaml applied on top."""
    keymap = register_os_defaults(Keymap())
    config = KeybindingConfig()
    config.load()
    config.apply(keymap)
    return keymap


@app.callback(invoke_without_command=True)
def keybindings(
    ctx: typer.Context,
    list_all: bool = typer.Option(
        False, "--list", "-l", help="List all keybindings"
    ),
    conflicts: bool = typer.Option(
        False, "--conflicts", "-c", help="Show keybinding conflicts"
    ),
    scope: Optional[str] = typer.Option(
        None, "--scope", help="Filter by scope (a zone id or 'global')"
    ),
    json_output: bool = typer.Option(
        False, "--json", "-j", help="Output as JSON"
    ),
):
    """
    Inspect the keymap.

    By default, shows a summary of keybindings and any conflicts.
    """
    if ctx.invoked_subcommand is not None:
        return

    keymap = build_keymap()
    detected = keymap.detect_conflicts()

    if json_output:
        print_json(keymap.to_dict())
        return

    if conflicts:
        _show_conflicts(keymap, detected)
        return

    if list_all:
        _show_all_bindings(keymap, scope)
        return

    _show_summary(keymap, detected)


def _show_summary(keymap: Keymap, conflicts) -> None:
    console.print("\n[bold]Keymap Summary[/bold]\n")

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Total bindings", str(len(keymap.bindings)))
    table.add_row("Unique keys", str(len(keymap.by_key)))
    table.add_row("Scopes", str(len(keymap.by_scope)))
    table.add_row("Conflicts", str(len(conflicts)))

    console.print(table)
    console.print()

    if conflicts:
        critical = len(keymap.get_conflicts_by_severity(ConflictSeverity.CRITICAL))
        info = len(keymap.get_conflicts_by_severity(ConflictSeverity.INFO))
        console.print("[bold]Conflict breakdown:[/bold]")
        if critical > 0:
            console.print(f"  [red]Critical: {critical}[/red]")
        if info > 0:
            console.print(f"  [dim]Info: {info}[/dim]")
        console.print("\nRun [bold]ariakernel keybindings --conflicts[/bold] to see details.")
    else:
        console.print("[green]No conflicts detected![/green]")

    console.print()


def _show_conflicts(keymap: Keymap, conflicts) -> None:
    if not conflicts:
        console.print("[green]No keybinding conflicts detected![/green]")
        return

    console.print(f"\n[bold]Keybinding Conflicts ({len(conflicts)})[/bold]\n")

    for severity in [ConflictSeverity.CRITICAL, ConflictSeverity.INFO]:
        severity_conflicts = keymap.get_conflicts_by_severity(severity)
        if not severity_conflicts:
            continue

        color = "red" if severity is ConflictSeverity.CRITICAL else "dim"
        console.print(f"[{color}][bold]{severity.value.upper()} ({len(severity_conflicts)})[/bold][/{color}]")

        table = Table(show_header=True, box=None)
        table.add_column("Key", style="bold")
        table.add_column("Command 1")
        table.add_column("Scope 1")
        table.add_column("Command 2")
        table.add_column("Scope 2")
        table.add_column("Type", style="dim")

        for conflict in severity_conflicts:
            table.add_row(
                conflict.key,
                conflict.binding1.command,
                conflict.binding1.scope,
                conflict.binding2.command,
                conflict.binding2.scope,
                conflict.conflict_type.value,
            )

        console.print(table)
        console.print()


def _show_all_bindings(keymap: Keymap, scope_filter: Optional[str]) -> None:
    bindings = keymap.bindings
    if scope_filter:
        scope = GLOBAL_SCOPE if scope_filter.lower() == "global" else scope_filter
        if scope not in keymap.by_scope:
            console.print(f"[yellow]Unknown scope: {scope_filter}[/yellow]")
            console.print("Available scopes:")
            for name in sorted(keymap.by_scope):
                console.print(f"  {name}")
            return
        bindings = keymap.by_scope[scope]

    console.print(f"\n[bold]All Keybindings ({len(bindings)})[/bold]\n")

    by_scope = {}
    for binding in bindings:
        by_scope.setdefault(binding.scope, []).append(binding)

    for scope_name in sorted(by_scope):
        scope_bindings = by_scope[scope_name]
        console.print(f"[bold]{scope_name}[/bold] ({len(scope_bindings)} bindings)")

        table = Table(show_header=True, box=None, padding=(0, 1))
        table.add_column("Key", style="bold", width=16)
        table.add_column("Command", width=20)
        table.add_column("When", style="dim", width=11)
        table.add_column("Source", style="dim", width=6)
        table.add_column("Description", style="dim")

        for binding in sorted(scope_bindings, key=lambda b: b.key):
            table.add_row(
                binding.key,
                binding.command,
                binding.when.value,
                binding.source,
                binding.description[:30] if binding.description else "",
            )

        console.print(table)
        console.print()


@app.command()
def init():
    """Create example keybindings config file."""
    path = get_config_path()

    if path.exists():
        console.print(f"[yellow]Config file already exists at {path}[/yellow]")
        return

    if save_example_config(path):
        console.print(f"[green]Created keybindings config at {path}[/green]")
    else:
        console.print("[red]Failed to create config file[/red]")
        raise typer.Exit(1)
