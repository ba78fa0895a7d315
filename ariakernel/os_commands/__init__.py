"""
OS command set.

The built-in commands every zone understands: focus, navigation, tab,
selection, activation, clipboard and list editing hooks, history hooks,
escape, expansion, slider values, typeahead, recovery, drag end and field
editing. They are defined in the GLOBAL scope, so app scopes can override
any of them.

Usage:
    kernel = create_os_kernel()
    mount_zone(kernel, ZoneEntry.create("list", role="listbox", items=["a", "b"]))
    kernel.dispatch(Command(OS_NAVIGATE, {"direction": "down"}))
"""

import logging
from typing import Any, Dict, Optional

from ..config.settings import KernelSettings
from ..geometry import Viewport
from ..kernel.commands import CommandFactory
from ..kernel.core import Kernel
from ..state import KernelState
from ..zones.registry import ZoneRegistry
from . import field, focus, interaction, navigate, selection, value
from .common import FOCUS_EFFECT
from .focus import mount_zone, restore_target, set_items, unmount_zone
from .types import OS_PASSTHROUGH

logger = logging.getLogger(__name__)

_MODULES = (focus, navigate, selection, interaction, value, field)


def install_os_commands(kernel: Kernel) -> Dict[str, CommandFactory]:
    """Define every OS command on ``kernel`` and return their factories by type."""
    for module in _MODULES:
        module.install(kernel)
    return {type: CommandFactory(type) for type in sorted(OS_PASSTHROUGH)}


def _log_focus(target: Any) -> None:
    logger.debug(f"Focus moved to {target}")


def create_os_kernel(
    zones: Optional[ZoneRegistry] = None,
    viewport: Optional[Viewport] = None,
    settings: Optional[KernelSettings] = None,
    initial_state: Optional[KernelState] = None,
) -> Kernel:
    """A kernel with the OS command set installed."""
    kernel = Kernel(initial_state, zones=zones, viewport=viewport, settings=settings)
    install_os_commands(kernel)
    kernel.define_effect(FOCUS_EFFECT, _log_focus)
    return kernel


__all__ = [
    "FOCUS_EFFECT",
    "create_os_kernel",
    "install_os_commands",
    "mount_zone",
    "restore_target",
    "set_items",
    "unmount_zone",
]
