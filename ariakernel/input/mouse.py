"""
Pointer click resolution.

Turns a recognized CLICK into the focus/select/activate commands for the
clicked item. Modifier keys pick the selection mode.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..kernel.commands import Command
from ..os_commands.types import OS_ACTIVATE, OS_FOCUS, OS_SELECT
from ..zones.registry import ZoneEntry


@dataclass(frozen=True)
class ClickInput:
    item_id: Optional[str]
    zone_id: Optional[str]
    shift: bool = False
    meta: bool = False
    ctrl: bool = False


def resolve_select_mode(shift: bool = False, meta: bool = False, ctrl: bool = False) -> str:
    """Shift extends a range, Meta/Ctrl toggles, a plain click replaces."""
    if shift:
        return "range"
    if meta or ctrl:
        return "toggle"
    return "replace"


def resolve_click(click: ClickInput, entry: Optional[ZoneEntry]) -> Tuple[Command, ...]:
    """Commands for a click on ``click.item_id`` inside ``entry``'s zone."""
    if click.zone_id is None:
        return ()
    if click.item_id is None:
        return (Command(OS_FOCUS, {"zone_id": click.zone_id, "item_id": None}),)

    commands = [
        Command(
            OS_FOCUS,
            {"zone_id": click.zone_id, "item_id": click.item_id, "follow_focus": False},
        )
    ]
    if entry is None:
        return tuple(commands)

    if entry.config.select.mode != "none":
        mode = resolve_select_mode(click.shift, click.meta, click.ctrl)
        commands.append(
            Command(OS_SELECT, {"zone_id": click.zone_id, "target_id": click.item_id, "mode": mode})
        )
    if entry.config.activate.on_click:
        commands.append(Command(OS_ACTIVATE, {"zone_id": click.zone_id, "item_id": click.item_id}))

    return tuple(commands)
