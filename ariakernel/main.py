#!/usr/bin/env python3
"""
Main CLI entry point for ariakernel
"""

from typing import List, Optional

import typer

from . import __version__
from .commands import keybindings, roles
from .config.settings import get_settings_path, load_settings, validate_all_env_vars
from .utils.logging import configure_logging
from .utils.output import console, print_json, settings_table

app = typer.Typer(help="Headless ARIA focus and command kernel")
app.command(name="roles")(roles.roles)
app.add_typer(keybindings.app, name="keybindings", help="Inspect the keymap")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
):
    """
    ariakernel - headless focus management and command dispatch for ARIA widgets

    [bold]Examples:[/bold]

    Show the listbox preset:
        [cyan]ariakernel roles listbox[/cyan]

    List every keybinding:
        [cyan]ariakernel keybindings --list[/cyan]
    """
    if verbose and quiet:
        typer.echo("Error: --verbose and --quiet are mutually exclusive", err=True)
        raise typer.Exit(1)

    if verbose:
        configure_logging("DEBUG")
    elif quiet:
        configure_logging("ERROR")
    else:
        configure_logging(load_settings().log_level)


@app.command()
def version():
    """Show ariakernel version"""
    typer.echo(f"ariakernel version {__version__}")


@app.command()
def settings(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
):
    """Show the effective kernel settings"""
    for error in validate_all_env_vars():
        console.print(f"[yellow]{error}[/yellow]")

    current = load_settings()
    if json_output:
        print_json(current.to_dict())
        return

    console.print(settings_table(current.to_dict(), title=str(get_settings_path())))


@app.command()
def demo(
    items: Optional[List[str]] = typer.Argument(None, help="Item labels"),
    role: str = typer.Option("listbox", "--role", "-r", help="Role preset of the list"),
):
    """Try a role preset in a kernel-driven Textual list"""
    from .ui import KernelDemoApp

    labels = {f"item{index}": label for index, label in enumerate(items)} if items else None
    KernelDemoApp(labels, role=role).run()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
