"""
App slices.

An app owns one ``AppState`` at ``state.apps[app_id]`` and defines commands in
its own scope. Handlers see only the slice and return a new slice, or a dict
holding the new slice under "state" plus any other effects.

Usage:
    todo = register_app(kernel, "todo", data={"items": ()})

    def add(app, payload):
        return replace(app, data={"items": app.data["items"] + (payload["id"],)})

    ADD = todo.command("TODO_ADD", add)
    kernel.dispatch(ADD(id="a"))
    kernel.dispatch(todo.undo_command())
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, Iterator, Optional

from ..config.constants import GLOBAL_SCOPE
from ..exceptions import TransactionError
from ..os_commands.types import OS_FOCUS
from ..state import AppState, get_app, set_app
from .commands import Command, CommandFactory
from .core import DispatchContext, Kernel
from .history import HistoryMiddleware, redo_kernel_state, undo_kernel_state
from .persistence import KeyValueStore, PersistenceMiddleware, hydrate_app_state

logger = logging.getLogger(__name__)

UNDO = "UNDO"
REDO = "REDO"

AppHandler = Callable[[AppState, Any], Any]


class AppHandle:
    """Scoped access to one app slice of a kernel."""

    def __init__(
        self,
        kernel: Kernel,
        app_id: str,
        initial: AppState,
        history: Optional[HistoryMiddleware] = None,
        persistence: Optional[PersistenceMiddleware] = None,
    ):
        self.kernel = kernel
        self.app_id = app_id
        self.initial = initial
        self.history = history
        self.persistence = persistence
        self.undo_command = kernel.define_command(UNDO, self._undo, scope=app_id)
        self.redo_command = kernel.define_command(REDO, self._redo, scope=app_id)

    @property
    def scope(self) -> str:
        return self.app_id

    @property
    def state(self) -> AppState:
        return get_app(self.kernel.get_state(), self.app_id)

    @property
    def data(self) -> Any:
        return self.state.data

    def command(
        self,
        type: str,
        handler: AppHandler,
        when: Optional[Callable[[DispatchContext], bool]] = None,
        log: bool = True,
    ) -> CommandFactory:
        """Define an app command whose handler maps (app state, payload) to a new app state."""

        def run(ctx: DispatchContext, payload: Any) -> Optional[Dict[str, Any]]:
            app = get_app(ctx.state, self.app_id)
            result = handler(app, payload)
            if result is None:
                return None
            if isinstance(result, AppState):
                result = {"state": result}
            effects = dict(result)
            new_app = effects.get("state")
            if new_app is None or new_app is app:
                effects.pop("state", None)
            else:
                effects["state"] = set_app(ctx.state, self.app_id, new_app)
            return effects

        return self.kernel.define_command(type, run, scope=self.app_id, when=when, log=log)

    def set_state(self, updater: Callable[[AppState], AppState]) -> None:
        """Replace the slice outside of dispatch (tests, hydration)."""
        state = self.kernel.get_state()
        self.kernel.set_state(set_app(state, self.app_id, updater(get_app(state, self.app_id))))

    def reset(self) -> None:
        self.set_state(lambda _: self.initial)

    def dispose(self) -> None:
        state = self.kernel.get_state()
        apps = {k: v for k, v in state.apps.items() if k != self.app_id}
        self.kernel.set_state(replace(state, apps=apps))
        self.kernel.remove_middleware(f"history:{self.app_id}")
        self.kernel.remove_middleware(f"persistence:{self.app_id}")
        if self.persistence is not None:
            self.persistence.cancel()

    # =========================================================================
    # History
    # =========================================================================

    def begin_transaction(self) -> str:
        if self.history is None:
            raise TransactionError("App has no history", app_id=self.app_id)
        return self.history.begin_transaction()

    def end_transaction(self) -> None:
        if self.history is None:
            raise TransactionError("App has no history", app_id=self.app_id)
        self.history.end_transaction()

    @contextmanager
    def transaction(self) -> Iterator[Optional[str]]:
        """Group every command dispatched inside the block into one undo step."""
        group_id = self.begin_transaction()
        try:
            yield group_id
        finally:
            self.end_transaction()

    def _limit(self) -> int:
        return self.history.limit if self.history is not None else self.kernel.settings.history_limit

    def _restore(self, ctx: DispatchContext, step) -> Dict[str, Any]:
        state, entry = step(ctx.state, self.app_id, self._limit())
        if entry is None:
            return {}
        effects: Dict[str, Any] = {"state": state}
        if entry.active_zone_id is not None and ctx.zones.has(entry.active_zone_id):
            effects["dispatch"] = Command(
                OS_FOCUS,
                {"zone_id": entry.active_zone_id, "item_id": entry.focused_item_id},
                GLOBAL_SCOPE,
            )
        return effects

    def _undo(self, ctx: DispatchContext, payload: Any) -> Dict[str, Any]:
        return self._restore(ctx, undo_kernel_state)

    def _redo(self, ctx: DispatchContext, payload: Any) -> Dict[str, Any]:
        return self._restore(ctx, redo_kernel_state)


def register_app(
    kernel: Kernel,
    app_id: str,
    data: Any = None,
    ui: Any = None,
    history: bool = True,
    persistence: Optional[Dict[str, Any]] = None,
    store: Optional[KeyValueStore] = None,
) -> AppHandle:
    """
    Register an app slice on ``kernel``.

    Args:
        kernel: Kernel to register on
        app_id: Slice key and command scope
        data: Initial domain data
        ui: Initial UI data
        history: Record undo history for this app
        persistence: ``{"key": ..., "debounce_ms": ...}`` to persist the slice
        store: Key-value store used for persistence

    Returns:
        Handle for defining commands and reading the slice
    """
    initial = AppState(data=data, ui=ui)
    kernel.group(app_id, GLOBAL_SCOPE)

    persist_mw: Optional[PersistenceMiddleware] = None
    start = initial
    if persistence is not None:
        if store is None:
            raise ValueError("persistence requires a store")
        key = persistence.get("key", app_id)
        debounce_ms = persistence.get("debounce_ms", kernel.settings.persist_debounce_ms)
        persist_mw = PersistenceMiddleware(app_id, key, store, debounce_ms)
        start = hydrate_app_state(initial, persist_mw.load())
        persist_mw.attach(kernel)

    kernel.set_state(set_app(kernel.get_state(), app_id, start))

    history_mw: Optional[HistoryMiddleware] = None
    if history:
        history_mw = HistoryMiddleware(app_id, kernel.settings.history_limit)
        kernel.use(history_mw.middleware())

    logger.debug(f"Registered app {app_id} (history={history}, persistence={persistence is not None})")
    return AppHandle(kernel, app_id, start, history_mw, persist_mw)
