"""Role preset inspection commands for ariakernel."""

from typing import Optional

import typer
from rich.table import Table

from ..roles import ROLE_PRESETS, child_role, resolve_role
from ..utils.output import console, print_json, settings_table


def roles(
    role: Optional[str] = typer.Argument(None, help="Show the resolved config of one role"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """
    List role presets, or show the resolved configuration of one role.
    """
    if role is not None:
        _show_role(role, json_output)
        return

    if json_output:
        print_json({name: resolve_role(name).to_dict() for name in sorted(ROLE_PRESETS)})
        return

    table = Table(title=f"Role presets ({len(ROLE_PRESETS)})")
    table.add_column("Role", style="cyan")
    table.add_column("Items")
    table.add_column("Orientation")
    table.add_column("Select")
    table.add_column("Tab")
    table.add_column("Escape", style="dim")

    for name in sorted(ROLE_PRESETS):
        config = resolve_role(name)
        select = config.select.mode
        if config.select.follow_focus:
            select += " (follow)"
        table.add_row(
            name,
            child_role(name),
            config.navigate.orientation,
            select,
            config.tab.behavior,
            config.dismiss.escape,
        )

    console.print(table)


def _show_role(role: str, json_output: bool) -> None:
    if role not in ROLE_PRESETS:
        console.print(f"[red]Unknown role: {role}[/red]")
        console.print("Available roles: " + ", ".join(sorted(ROLE_PRESETS)))
        raise typer.Exit(1)

    config = resolve_role(role).to_dict()
    if json_output:
        print_json(config)
        return

    console.print(f"\n[bold]{role}[/bold] (items: {child_role(role)})\n")
    console.print(settings_table(config))
    console.print()
