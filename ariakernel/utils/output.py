"""Shared console output utilities."""

import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table

# Shared console instance for all CLI output
console = Console()


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout (enums and tuples become plain values)."""
    print(json.dumps(data, indent=2, default=str))


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested config sections into dotted keys, skipping empty sections."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, f"{name}."))
        elif value is not None:
            flat[name] = value
    return flat


def settings_table(values: Dict[str, Any], title: Optional[str] = None) -> Table:
    """Two-column table of dotted setting names and their values."""
    table = Table(title=title, show_header=False, box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value", style="bold")
    for key, value in flatten(values).items():
        table.add_row(key, str(value))
    return table
