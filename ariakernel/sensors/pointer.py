"""Pointer sensor: press, move and release through the gesture recognizer."""

import logging
from typing import Optional, Tuple

from ..input.gesture import (
    IDLE,
    GestureOutcome,
    GestureResult,
    GestureState,
    PointerDown,
    PointerMove,
    PointerUp,
    pointer_down,
    pointer_move,
    pointer_up,
)
from ..input.mouse import ClickInput, resolve_click
from ..kernel.commands import Command
from ..kernel.core import Kernel
from ..os_commands.types import OS_DRAG_END, OS_ESCAPE

logger = logging.getLogger(__name__)


class PointerSensor:
    def __init__(self, kernel: Kernel, threshold: Optional[float] = None):
        self.kernel = kernel
        self.threshold = threshold if threshold is not None else kernel.settings.drag_threshold_px
        self.state: GestureState = IDLE
        self._modifiers: Tuple[bool, bool, bool] = (False, False, False)

    def down(self, event: PointerDown, shift: bool = False, meta: bool = False, ctrl: bool = False) -> None:
        self._dismiss_outside(event.zone_id)
        self.state = pointer_down(self.state, event)
        self._modifiers = (shift, meta, ctrl)

    def move(self, event: PointerMove) -> None:
        self.state = pointer_move(self.state, event, self.threshold)

    def up(self, event: PointerUp) -> GestureResult:
        result = pointer_up(self.state, event)
        self.state = result.state

        if result.outcome is GestureOutcome.CLICK:
            shift, meta, ctrl = self._modifiers
            click = ClickInput(result.item_id, result.zone_id, shift=shift, meta=meta, ctrl=ctrl)
            for command in resolve_click(click, self.kernel.zones.get(result.zone_id)):
                self.kernel.dispatch(command, meta={"type": "POINTER"})
        elif result.outcome is GestureOutcome.DRAG_END:
            payload = {"zone_id": result.zone_id, "item_id": result.item_id, "over_id": result.over_item_id}
            self.kernel.dispatch(Command(OS_DRAG_END, payload), meta={"type": "POINTER"})

        return result

    def cancel(self) -> None:
        self.state = IDLE

    def _dismiss_outside(self, zone_id: Optional[str]) -> None:
        """A press outside the active zone closes it when the zone asks for that."""
        active = self.kernel.get_state().focus.active_zone_id
        entry = self.kernel.zones.get(active)
        if entry is None or entry.config.dismiss.outside_click != "close":
            return
        if zone_id is not None and active in self.kernel.zones.zone_path(zone_id):
            return
        logger.debug(f"Outside click dismisses {active}")
        self.kernel.dispatch(Command(OS_ESCAPE, {"zone_id": active, "reason": "outside_click"}))
