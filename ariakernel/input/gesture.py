"""
Pointer gesture recognizer.

Pure state machine over pointer down/move/up. A press becomes PENDING; it
turns into a DRAG only when it moves past the threshold and started on a drag
handle, so jittery clicks never drag. Releasing reports CLICK, DRAG_END, or
NONE and always returns to IDLE.

Usage:
    state = GestureState()
    state = pointer_down(state, PointerDown(button=0, x=10, y=10, item_id="a", zone_id="list"))
    result = pointer_up(state, PointerUp(x=10, y=10))
    assert result.outcome is GestureOutcome.CLICK
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config.constants import DRAG_THRESHOLD_PX, PRIMARY_BUTTON


class GesturePhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    DRAG = "drag"


class GestureOutcome(Enum):
    NONE = "none"
    CLICK = "click"
    DRAG_END = "drag_end"


@dataclass(frozen=True)
class GestureState:
    phase: GesturePhase = GesturePhase.IDLE
    start_x: float = 0
    start_y: float = 0
    item_id: Optional[str] = None
    zone_id: Optional[str] = None
    has_drag_handle: bool = False


@dataclass(frozen=True)
class PointerDown:
    button: int
    x: float
    y: float
    item_id: Optional[str] = None
    zone_id: Optional[str] = None
    has_drag_handle: bool = False


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float
    y: float
    over_item_id: Optional[str] = None


@dataclass(frozen=True)
class GestureResult:
    state: GestureState
    outcome: GestureOutcome = GestureOutcome.NONE
    item_id: Optional[str] = None
    zone_id: Optional[str] = None
    over_item_id: Optional[str] = None


IDLE = GestureState()


def pointer_down(state: GestureState, event: PointerDown) -> GestureState:
    if event.button != PRIMARY_BUTTON:
        return IDLE
    if event.item_id is None and event.zone_id is None:
        return IDLE
    return GestureState(
        phase=GesturePhase.PENDING,
        start_x=event.x,
        start_y=event.y,
        item_id=event.item_id,
        zone_id=event.zone_id,
        has_drag_handle=event.has_drag_handle,
    )


def pointer_move(
    state: GestureState, event: PointerMove, threshold: float = DRAG_THRESHOLD_PX
) -> GestureState:
    if state.phase is not GesturePhase.PENDING:
        return state
    moved = abs(event.x - state.start_x) > threshold or abs(event.y - state.start_y) > threshold
    if moved and state.has_drag_handle:
        return GestureState(
            phase=GesturePhase.DRAG,
            start_x=state.start_x,
            start_y=state.start_y,
            item_id=state.item_id,
            zone_id=state.zone_id,
            has_drag_handle=True,
        )
    return state


def pointer_up(state: GestureState, event: PointerUp) -> GestureResult:
    if state.phase is GesturePhase.PENDING:
        return GestureResult(IDLE, GestureOutcome.CLICK, state.item_id, state.zone_id)
    if state.phase is GesturePhase.DRAG:
        return GestureResult(
            IDLE, GestureOutcome.DRAG_END, state.item_id, state.zone_id, event.over_item_id
        )
    return GestureResult(IDLE)
