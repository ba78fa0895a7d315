"""
Command kernel.

A synchronous command bus over one immutable ``KernelState`` value.

Dispatch runs to completion before the next command starts:

1. applicable ``before`` middleware, in registration order
2. the handler, bubbling up the scope path while handlers return None
3. applicable ``after`` middleware, in reverse registration order
4. effects: ``state`` first, then custom effects, then ``dispatch``

Commands dispatched while a dispatch is running are queued and processed
in FIFO order once the current one finishes.

Usage:
    kernel = Kernel(KernelState(), zones=ZoneRegistry())

    def increment(ctx, payload):
        return {"state": replace(ctx.state, ...)}

    INCREMENT = kernel.define_command("INCREMENT", increment)
    result = kernel.dispatch(INCREMENT())
    assert result.ok
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence, Tuple

from ..config.constants import GLOBAL_SCOPE
from ..config.settings import KernelSettings
from ..geometry import StaticViewport, Viewport
from ..state import KernelState
from ..zones.registry import ZoneRegistry
from .commands import Command, CommandFactory

logger = logging.getLogger(__name__)

Effects = Dict[str, Any]
Handler = Callable[["DispatchContext", Any], Optional[Effects]]
Guard = Callable[["DispatchContext"], bool]
EffectHandler = Callable[[Any], None]
Listener = Callable[[], None]


class DispatchStatus(Enum):
    HANDLED = "handled"  # a handler returned effects
    NOOP = "noop"  # handlers exist but none produced effects
    BLOCKED = "blocked"  # a ``when`` guard rejected the command
    UNKNOWN = "unknown"  # no handler on the scope path
    QUEUED = "queued"  # dispatched during another dispatch, runs later


class DispatchPhase(Enum):
    IDLE = "idle"
    BEFORE = "before"
    HANDLER = "handler"
    AFTER = "after"
    EFFECTS = "effects"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    command: Command
    handler_scope: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (DispatchStatus.HANDLED, DispatchStatus.NOOP, DispatchStatus.QUEUED)


@dataclass
class DispatchContext:
    """In-flight dispatch, shared by middleware and the handler."""

    command: Command
    state: KernelState
    kernel: "Kernel"
    meta: Dict[str, Any] = field(default_factory=dict)
    scope: str = GLOBAL_SCOPE
    bubble_path: Tuple[str, ...] = (GLOBAL_SCOPE,)
    injected: Dict[str, Any] = field(default_factory=dict)
    effects: Optional[Effects] = None

    @property
    def zones(self) -> ZoneRegistry:
        return self.kernel.zones

    @property
    def viewport(self) -> Viewport:
        return self.kernel.viewport

    @property
    def settings(self) -> KernelSettings:
        return self.kernel.settings

    def inject(self, name: str) -> Any:
        """Value of context provider ``name``, resolved once per dispatch."""
        if name not in self.injected:
            self.injected[name] = self.kernel.resolve_context(name)
        return self.injected[name]


@dataclass
class Middleware:
    """
    Hooks around every applicable dispatch.

    ``before``/``after`` receive the DispatchContext and may mutate it or
    return a replacement. Middleware applies when its scope is GLOBAL or lies
    on the command's bubble path. Registering the same id again replaces it.
    """

    id: str
    scope: str = GLOBAL_SCOPE
    before: Optional[Callable[[DispatchContext], Optional[DispatchContext]]] = None
    after: Optional[Callable[[DispatchContext], Optional[DispatchContext]]] = None


@dataclass(frozen=True)
class Transaction:
    """Record of one processed command, kept for inspection and time travel."""

    id: int
    timestamp: float
    command: Command
    status: DispatchStatus
    handler_scope: Optional[str]
    bubble_path: Tuple[str, ...]
    effects: Optional[Effects]
    state_before: KernelState
    state_after: KernelState
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return self.state_before is not self.state_after


@dataclass
class _CommandDef:
    type: str
    scope: str
    handler: Handler
    when: Optional[Guard] = None
    log: bool = True


class Kernel:
    """Scoped command registry, middleware pipeline and state store."""

    def __init__(
        self,
        initial_state: Optional[KernelState] = None,
        zones: Optional[ZoneRegistry] = None,
        viewport: Optional[Viewport] = None,
        settings: Optional[KernelSettings] = None,
    ):
        self.settings = settings or KernelSettings()
        self.zones = zones if zones is not None else ZoneRegistry()
        self.viewport = viewport if viewport is not None else StaticViewport()

        self._state = initial_state or KernelState()
        self._listeners: List[Listener] = []
        self._commands: Dict[str, Dict[str, _CommandDef]] = {}
        self._middleware: List[Middleware] = []
        self._effects: Dict[str, EffectHandler] = {}
        self._contexts: Dict[str, Callable[[], Any]] = {}
        self._parents: Dict[str, str] = {}

        self._queue: Deque[Tuple[Command, Dict[str, Any], Optional[Tuple[str, ...]]]] = deque()
        self._processing = False
        self._phase = DispatchPhase.IDLE

        self.transactions: Deque[Transaction] = deque(maxlen=self.settings.transaction_log_limit)
        self._next_transaction_id = 0

    # =========================================================================
    # Store
    # =========================================================================

    def get_state(self) -> KernelState:
        return self._state

    def set_state(self, state: KernelState) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns the unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def phase(self) -> DispatchPhase:
        return self._phase

    @property
    def is_dispatching(self) -> bool:
        return self._processing

    # =========================================================================
    # Registration
    # =========================================================================

    def define_command(
        self,
        type: str,
        handler: Handler,
        scope: str = GLOBAL_SCOPE,
        when: Optional[Guard] = None,
        log: bool = True,
    ) -> CommandFactory:
        """
        Register ``handler`` for ``type`` in ``scope``.

        Args:
            type: Command type name
            handler: ``(ctx, payload) -> effects`` or None to bubble
            scope: Scope the handler lives in
            when: Guard evaluated before the handler; False blocks the command
            log: False keeps the command out of undo history

        Returns:
            Factory building commands of this type
        """
        scoped = self._commands.setdefault(scope, {})
        if type in scoped:
            logger.debug(f"Replacing handler for {type} in scope {scope}")
        scoped[type] = _CommandDef(type, scope, handler, when, log)
        return CommandFactory(type, scope)

    def has_command(self, type: str, scope: str = GLOBAL_SCOPE) -> bool:
        return type in self._commands.get(scope, {})

    def is_logged(self, command: Command) -> bool:
        """False when the command was defined with ``log=False``."""
        for scope in self.bubble_path(command.scope):
            definition = self._commands.get(scope, {}).get(command.type)
            if definition is not None:
                return definition.log
        return True

    def group(self, scope: str, parent: str = GLOBAL_SCOPE) -> str:
        """Declare ``scope`` as a child of ``parent`` for handler bubbling."""
        if scope != parent and scope != GLOBAL_SCOPE:
            self._parents[scope] = parent
        return scope

    def bubble_path(self, scope: str) -> Tuple[str, ...]:
        path = [scope]
        current = scope
        while current in self._parents and self._parents[current] not in path:
            current = self._parents[current]
            path.append(current)
        if path[-1] != GLOBAL_SCOPE:
            path.append(GLOBAL_SCOPE)
        return tuple(path)

    def use(self, middleware: Middleware) -> None:
        for index, existing in enumerate(self._middleware):
            if existing.id == middleware.id:
                self._middleware[index] = middleware
                return
        self._middleware.append(middleware)

    def remove_middleware(self, middleware_id: str) -> None:
        self._middleware = [m for m in self._middleware if m.id != middleware_id]

    def define_effect(self, name: str, handler: EffectHandler) -> str:
        if name in ("state", "dispatch"):
            raise ValueError(f"'{name}' is a built-in effect")
        self._effects[name] = handler
        return name

    def define_context(self, name: str, provider: Callable[[], Any]) -> str:
        self._contexts[name] = provider
        return name

    def resolve_context(self, name: str) -> Any:
        provider = self._contexts.get(name)
        if provider is None:
            logger.warning(f"No context provider registered for '{name}'")
            return None
        return provider()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def dispatch(
        self,
        command: Command,
        meta: Optional[Dict[str, Any]] = None,
        scope_path: Optional[Sequence[str]] = None,
    ) -> DispatchResult:
        """
        Process ``command`` and everything it dispatches.

        Returns:
            Result of ``command`` itself; QUEUED when called during a dispatch
        """
        path = tuple(scope_path) if scope_path else None
        self._queue.append((command, dict(meta or {}), path))
        if self._processing:
            return DispatchResult(DispatchStatus.QUEUED, command)

        self._processing = True
        first: Optional[DispatchResult] = None
        try:
            while self._queue:
                queued, queued_meta, queued_path = self._queue.popleft()
                result = self._process(queued, queued_meta, queued_path)
                if first is None:
                    first = result
        finally:
            self._processing = False
            self._phase = DispatchPhase.IDLE
            self._queue.clear()
        return first if first is not None else DispatchResult(DispatchStatus.UNKNOWN, command)

    def _applicable(self, path: Tuple[str, ...]) -> List[Middleware]:
        return [m for m in self._middleware if m.scope == GLOBAL_SCOPE or m.scope in path]

    def _process(
        self,
        command: Command,
        meta: Dict[str, Any],
        scope_path: Optional[Tuple[str, ...]],
    ) -> DispatchResult:
        state_before = self._state
        path = scope_path or self.bubble_path(command.scope)
        ctx = DispatchContext(command=command, state=state_before, kernel=self, meta=meta, bubble_path=path)
        middleware = self._applicable(path)

        self._phase = DispatchPhase.BEFORE
        for mw in middleware:
            if mw.before is not None:
                ctx = mw.before(ctx) or ctx

        self._phase = DispatchPhase.HANDLER
        status = DispatchStatus.UNKNOWN
        handler_scope: Optional[str] = None
        for scope in path:
            definition = self._commands.get(scope, {}).get(ctx.command.type)
            if definition is None:
                continue
            ctx.scope = scope
            if definition.when is not None and not definition.when(ctx):
                logger.debug(f"{ctx.command.type} blocked by its guard in scope {scope}")
                status = DispatchStatus.BLOCKED
                break
            effects = definition.handler(ctx, ctx.command.payload)
            status = DispatchStatus.NOOP
            if effects is None:
                continue
            ctx.effects = effects
            handler_scope = scope
            status = DispatchStatus.HANDLED if effects else DispatchStatus.NOOP
            break

        if status is DispatchStatus.UNKNOWN:
            logger.warning(f"No handler for command {ctx.command.type} on path {list(path)}")

        if status is not DispatchStatus.BLOCKED:
            self._phase = DispatchPhase.AFTER
            for mw in reversed(middleware):
                if mw.after is not None:
                    ctx = mw.after(ctx) or ctx

        if ctx.effects and status is not DispatchStatus.BLOCKED:
            self._phase = DispatchPhase.EFFECTS
            self._run_effects(ctx.effects)

        self._phase = DispatchPhase.IDLE
        self._record(ctx, status, handler_scope, path, state_before)
        return DispatchResult(status, ctx.command, handler_scope)

    def _run_effects(self, effects: Effects) -> None:
        if effects.get("state") is not None:
            self.set_state(effects["state"])

        for name, value in effects.items():
            if name in ("state", "dispatch") or value is None:
                continue
            handler = self._effects.get(name)
            if handler is None:
                logger.warning(f"Unknown effect '{name}'")
                continue
            try:
                handler(value)
            except Exception:
                logger.exception(f"Effect '{name}' failed")

        queued = effects.get("dispatch")
        if queued:
            commands = queued if isinstance(queued, (list, tuple)) else [queued]
            for command in commands:
                if command is not None:
                    self._queue.append((command, {}, None))

    def _record(
        self,
        ctx: DispatchContext,
        status: DispatchStatus,
        handler_scope: Optional[str],
        path: Tuple[str, ...],
        state_before: KernelState,
    ) -> None:
        self.transactions.append(
            Transaction(
                id=self._next_transaction_id,
                timestamp=time.time(),
                command=ctx.command,
                status=status,
                handler_scope=handler_scope,
                bubble_path=path,
                effects=ctx.effects,
                state_before=state_before,
                state_after=self._state,
                meta=ctx.meta,
            )
        )
        self._next_transaction_id += 1

    # =========================================================================
    # Inspection
    # =========================================================================

    def last_transaction(self) -> Optional[Transaction]:
        return self.transactions[-1] if self.transactions else None

    def clear_transactions(self) -> None:
        self.transactions.clear()
        self._next_transaction_id = 0

    def travel_to(self, transaction_id: int) -> bool:
        """Restore the state recorded after transaction ``transaction_id``."""
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                self.set_state(transaction.state_after)
                return True
        logger.warning(f"Transaction {transaction_id} not found")
        return False

    def reset(self, state: Optional[KernelState] = None) -> None:
        self.set_state(state or KernelState())
        self.clear_transactions()
