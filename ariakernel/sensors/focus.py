"""
Focus sensor.

Keeps host focus and kernel focus in step. It owns the ``focus`` effect, so
kernel-driven focus changes reach the host, and reports focus the host moved
on its own (a click on a text field, a screen switch) back to the kernel.
Host focus events fired while the kernel applies its own effects are echoes
and are ignored.
"""

import logging
from collections import deque
from typing import Callable, Deque, Iterable, Optional, Tuple

from ..kernel.commands import Command
from ..kernel.core import DispatchPhase, Kernel
from ..os_commands.common import FOCUS_EFFECT
from ..os_commands.types import OS_RECOVER, OS_SYNC_FOCUS

logger = logging.getLogger(__name__)

FocusElement = Callable[[str, str], None]
Scheduler = Callable[[Callable[[], None]], None]


class FocusSensor:
    """
    Args:
        kernel: Kernel to sync with
        focus_element: Moves host focus to (zone_id, item_id)
        scheduler: Runs a callback later; defaults to a queue drained by ``flush``
    """

    def __init__(
        self,
        kernel: Kernel,
        focus_element: Optional[FocusElement] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        self.kernel = kernel
        self.focus_element = focus_element
        self._pending: Deque[Callable[[], None]] = deque()
        self.scheduler = scheduler or self._pending.append
        self.focused: Optional[Tuple[str, str]] = None
        kernel.define_effect(FOCUS_EFFECT, self._apply)

    def _apply(self, target) -> None:
        zone_id, item_id = target["zone_id"], target["item_id"]
        self.focused = (zone_id, item_id)
        if self.focus_element is not None:
            self.focus_element(zone_id, item_id)

    def focus_in(self, zone_id: str, item_id: str) -> bool:
        """
        Report that host focus landed on ``item_id``.

        Returns:
            True if the kernel was told, False for echoes and no-ops
        """
        if self.kernel.phase is DispatchPhase.EFFECTS:
            return False
        focus = self.kernel.get_state().focus
        if focus.active_zone_id == zone_id and focus.zone(zone_id).focused_item_id == item_id:
            return False
        self.focused = (zone_id, item_id)
        self.kernel.dispatch(Command(OS_SYNC_FOCUS, {"zone_id": zone_id, "item_id": item_id}))
        return True

    def notify_removed(self, item_ids: Iterable[str]) -> None:
        """Schedule focus recovery for every zone whose focused item was removed."""
        removed = set(item_ids)
        zones = self.kernel.get_state().focus.zones
        for zone_id, zone in zones.items():
            if zone.focused_item_id in removed:
                logger.debug(f"Focused item {zone.focused_item_id} of {zone_id} removed")
                self.scheduler(self._recover(zone_id))

    def _recover(self, zone_id: str) -> Callable[[], None]:
        def run() -> None:
            self.kernel.dispatch(Command(OS_RECOVER, {"zone_id": zone_id}))

        return run

    def flush(self) -> None:
        """Run scheduled recoveries (default scheduler only)."""
        while self._pending:
            self._pending.popleft()()
