"""
Command values and factories.

A ``Command`` is a plain value: a type name, an optional payload, and the
scope it was defined in. Factories returned by ``Kernel.define_command`` build
commands and are what application code passes around.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.constants import GLOBAL_SCOPE


@dataclass(frozen=True)
class Command:
    type: str
    payload: Any = None
    scope: str = GLOBAL_SCOPE

    def payload_get(self, key: str, default: Any = None) -> Any:
        """Read ``key`` from a mapping payload, tolerating non-mapping payloads."""
        if isinstance(self.payload, dict):
            return self.payload.get(key, default)
        return default

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "payload": self.payload, "scope": self.scope}


class CommandFactory:
    """
    Callable that builds commands of one type.

    Usage:
        NAVIGATE = kernel.define_command("OS_NAVIGATE", handler)
        kernel.dispatch(NAVIGATE(direction="down"))
    """

    def __init__(self, type: str, scope: str = GLOBAL_SCOPE):
        self.type = type
        self.scope = scope

    def __call__(self, payload: Optional[Any] = None, **kwargs: Any) -> Command:
        if kwargs:
            payload = {**(payload or {}), **kwargs}
        return Command(self.type, payload, self.scope)

    def __repr__(self) -> str:
        return f"CommandFactory({self.type!r}, scope={self.scope!r})"
