"""
Undo/redo history for one app slice.

``HistoryMiddleware`` snapshots the app slice and the focused item before a
command runs, and after it runs records a ``HistoryEntry`` when the slice's
``data`` changed. Commands in the OS passthrough set, self-managed history
commands and commands defined with ``log=False`` are never recorded.

Transactions group entries under one ``group_id`` so undo and redo treat
them as a single step. They nest; only the outermost end closes the group.

Usage:
    history = HistoryMiddleware("todo")
    kernel.use(history.middleware())

    with history.transaction():
        kernel.dispatch(DELETE(id="a"))
        kernel.dispatch(DELETE(id="b"))
"""

import logging
import secrets
import time
from contextlib import contextmanager
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple

from ..config.constants import HISTORY_LIMIT
from ..exceptions import TransactionError
from ..os_commands.types import OS_PASSTHROUGH, SELF_MANAGED
from ..state import AppState, HistoryEntry, HistoryState, KernelState, get_app, set_app
from .core import DispatchContext, Middleware

logger = logging.getLogger(__name__)

_BEFORE = "_history_before"
_FOCUS_ID = "_history_focus_id"
_ZONE_ID = "_history_zone_id"


def new_group_id() -> str:
    return f"txn-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def capture_focus(state: KernelState) -> Tuple[Optional[str], Optional[str]]:
    """(active zone id, its focused item id)."""
    zone_id = state.focus.active_zone_id
    if zone_id is None:
        return None, None
    return zone_id, state.focus.zone(zone_id).focused_item_id


class HistoryMiddleware:
    """Records undoable entries for ``app_id``."""

    def __init__(self, app_id: str, limit: int = HISTORY_LIMIT):
        self.app_id = app_id
        self.limit = limit
        self._depth = 0
        self._group_id: Optional[str] = None

    # =========================================================================
    # Transactions
    # =========================================================================

    @property
    def active_group_id(self) -> Optional[str]:
        return self._group_id

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def begin_transaction(self) -> str:
        self._depth += 1
        if self._depth == 1:
            self._group_id = new_group_id()
            logger.debug(f"History transaction {self._group_id} opened for {self.app_id}")
        return self._group_id

    def end_transaction(self) -> None:
        if self._depth == 0:
            raise TransactionError(app_id=self.app_id)
        self._depth -= 1
        if self._depth == 0:
            logger.debug(f"History transaction {self._group_id} closed for {self.app_id}")
            self._group_id = None

    @contextmanager
    def transaction(self) -> Iterator[str]:
        group_id = self.begin_transaction()
        try:
            yield group_id
        finally:
            self.end_transaction()

    # =========================================================================
    # Middleware hooks
    # =========================================================================

    def before(self, ctx: DispatchContext) -> DispatchContext:
        zone_id, focus_id = capture_focus(ctx.state)
        ctx.injected[_BEFORE] = ctx.state.apps.get(self.app_id)
        ctx.injected[_FOCUS_ID] = focus_id
        ctx.injected[_ZONE_ID] = zone_id
        return ctx

    def after(self, ctx: DispatchContext) -> DispatchContext:
        command = ctx.command
        if command.type in OS_PASSTHROUGH or command.type in SELF_MANAGED:
            return ctx
        if not ctx.kernel.is_logged(command):
            return ctx

        previous: Optional[AppState] = ctx.injected.get(_BEFORE)
        effects = ctx.effects or {}
        next_state: Optional[KernelState] = effects.get("state")
        if previous is None or next_state is None:
            return ctx

        current = next_state.apps.get(self.app_id)
        if current is None or current.data is previous.data:
            return ctx

        entry = HistoryEntry(
            command={"type": command.type, "payload": command.payload},
            timestamp=time.time(),
            snapshot=previous.without_history(),
            focused_item_id=ctx.injected.get(_FOCUS_ID),
            active_zone_id=ctx.injected.get(_ZONE_ID),
            group_id=self._group_id,
        )
        past = (current.history.past + (entry,))[-self.limit:]
        recorded = replace(current, history=HistoryState(past=past, future=()))
        ctx.effects = {**effects, "state": set_app(next_state, self.app_id, recorded)}
        logger.debug(f"Recorded {command.type} in {self.app_id} history ({len(past)} entries)")
        return ctx

    def middleware(self) -> Middleware:
        return Middleware(
            id=f"history:{self.app_id}",
            scope=self.app_id,
            before=self.before,
            after=self.after,
        )


# =============================================================================
# Undo / redo
# =============================================================================


def _take_group(stack: Tuple[HistoryEntry, ...]) -> Tuple[Tuple[HistoryEntry, ...], List[HistoryEntry]]:
    """Split the newest entry, plus older entries of its group, off ``stack``."""
    last = stack[-1]
    taken = [last]
    index = len(stack) - 1
    if last.group_id is not None:
        while index > 0 and stack[index - 1].group_id == last.group_id:
            index -= 1
            taken.insert(0, stack[index])
    return stack[:index], taken


def undo_app_state(app: AppState, limit: int = HISTORY_LIMIT) -> Tuple[AppState, Optional[HistoryEntry]]:
    """
    Undo the latest step of ``app``.

    Returns:
        (restored app state, the entry whose captured focus should be restored),
        or (app, None) when there is nothing to undo
    """
    if not app.history.past:
        return app, None

    remaining, taken = _take_group(app.history.past)
    earliest = taken[0]
    redo_entry = HistoryEntry(
        command=taken[-1].command,
        timestamp=time.time(),
        snapshot=app.without_history(),
        focused_item_id=taken[-1].focused_item_id,
        active_zone_id=taken[-1].active_zone_id,
        group_id=earliest.group_id,
    )
    future = (app.history.future + (redo_entry,))[-limit:]
    restored = replace(
        earliest.snapshot,
        history=HistoryState(past=remaining, future=future),
    )
    return restored, earliest


def redo_app_state(app: AppState, limit: int = HISTORY_LIMIT) -> Tuple[AppState, Optional[HistoryEntry]]:
    """Mirror of ``undo_app_state`` over the future stack."""
    if not app.history.future:
        return app, None

    entry = app.history.future[-1]
    undo_entry = HistoryEntry(
        command=entry.command,
        timestamp=time.time(),
        snapshot=app.without_history(),
        focused_item_id=entry.focused_item_id,
        active_zone_id=entry.active_zone_id,
        group_id=entry.group_id,
    )
    past = (app.history.past + (undo_entry,))[-limit:]
    restored = replace(
        entry.snapshot,
        history=HistoryState(past=past, future=app.history.future[:-1]),
    )
    return restored, entry


def undo_kernel_state(state: KernelState, app_id: str, limit: int = HISTORY_LIMIT):
    app, entry = undo_app_state(get_app(state, app_id), limit)
    if entry is None:
        return state, None
    return set_app(state, app_id, app), entry


def redo_kernel_state(state: KernelState, app_id: str, limit: int = HISTORY_LIMIT):
    app, entry = redo_app_state(get_app(state, app_id), limit)
    if entry is None:
        return state, None
    return set_app(state, app_id, app), entry
