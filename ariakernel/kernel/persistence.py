"""
Debounced persistence of app slices.

After a dispatch changes an app slice, a save is scheduled ``debounce_ms``
later. Another change inside the window reschedules it, so only the last
write fires. Saves read the slice fresh from the kernel when they fire.

Storage failures are logged and swallowed: the in-memory state stays
correct, only durability is lost.

Usage:
    store = JsonFileStore(get_config_dir() / "state")
    todo = register_app(kernel, "todo", data=..., persistence={"key": "todo-v1"}, store=store)
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol

from ..exceptions import PersistenceError
from ..state import AppState, get_app
from .core import Middleware

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _thread_timer(interval: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer


class Debouncer:
    """Run the most recently scheduled callback once the delay has passed."""

    def __init__(self, delay_ms: int, timer_factory: Optional[TimerFactory] = None):
        self.delay_ms = delay_ms
        self._timer_factory = timer_factory or _thread_timer
        self._timer: Optional[TimerHandle] = None
        self._callback: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def call(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._callback = callback
            self._timer = self._timer_factory(self.delay_ms / 1000, self._fire)
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._callback = None

    def flush(self) -> None:
        """Run the pending callback now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
        self._fire()

    def _fire(self) -> None:
        with self._lock:
            callback = self._callback
            self._timer = None
            self._callback = None
        if callback is not None:
            callback()


# =============================================================================
# Stores
# =============================================================================


class KeyValueStore(Protocol):
    def load(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    def save(self, key: str, value: Dict[str, Any]) -> None:
        ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self) -> None:
        self.values: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        return self.values.get(key)

    def save(self, key: str, value: Dict[str, Any]) -> None:
        self.values[key] = value


class JsonFileStore:
    """One JSON file per key in ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_." else "_" for c in key)
        return self.directory / f"{safe}.json"

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            with open(path) as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}", key=key) from e

    def save(self, key: str, value: Dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(value, indent=2)
            path.write_text(payload)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write {path}: {e}", key=key) from e


# =============================================================================
# Middleware
# =============================================================================


def serialize_app_state(app: AppState) -> Dict[str, Any]:
    return {"data": app.data, "ui": app.ui}


def _merge(initial: Any, loaded: Any) -> Any:
    if isinstance(initial, dict) and isinstance(loaded, dict):
        return {**initial, **loaded}
    return loaded if loaded else initial


def hydrate_app_state(initial: AppState, loaded: Optional[Any]) -> AppState:
    """
    Merge persisted ``data``/``ui`` onto the initial slice, one level deep.

    Keys added since the save keep their defaults; keys the save still has
    win. Anything that is not a mapping is ignored.
    """
    if not isinstance(loaded, dict):
        return initial
    return AppState(
        data=_merge(initial.data, loaded.get("data")),
        ui=_merge(initial.ui, loaded.get("ui")),
        history=initial.history,
    )


class PersistenceMiddleware:
    """Saves one app slice to a key-value store after it changes."""

    def __init__(
        self,
        app_id: str,
        key: str,
        store: KeyValueStore,
        debounce_ms: int,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.app_id = app_id
        self.key = key
        self.store = store
        self.debouncer = Debouncer(debounce_ms, timer_factory)
        self._kernel = None
        self._last_seen: Optional[AppState] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        try:
            return self.store.load(self.key)
        except PersistenceError as e:
            logger.warning(f"Could not hydrate {self.app_id}: {e}")
            return None

    def attach(self, kernel) -> None:
        self._kernel = kernel
        kernel.use(Middleware(id=f"persistence:{self.app_id}", scope=self.app_id, after=self.after))
        self._unsubscribe = kernel.subscribe(self._on_state_change)

    def _on_state_change(self) -> None:
        # A direct set_state (test restore, reset) makes a pending save stale
        current = get_app(self._kernel.get_state(), self.app_id)
        if current is not self._last_seen and self.debouncer.pending and not self._kernel.is_dispatching:
            self.debouncer.cancel()
            self._last_seen = current

    def after(self, ctx):
        effects = ctx.effects or {}
        next_state = effects.get("state")
        if next_state is None:
            return ctx
        app = next_state.apps.get(self.app_id)
        if app is None or app is self._last_seen:
            return ctx
        self._last_seen = app
        self.debouncer.call(self.save_now)
        return ctx

    def save_now(self) -> None:
        if self._kernel is None:
            return
        app = get_app(self._kernel.get_state(), self.app_id)
        try:
            self.store.save(self.key, serialize_app_state(app))
            logger.debug(f"Persisted {self.app_id} to {self.key}")
        except PersistenceError as e:
            logger.warning(f"Could not persist {self.app_id}: {e}")

    def flush(self) -> None:
        self.debouncer.flush()

    def cancel(self) -> None:
        self.debouncer.cancel()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
