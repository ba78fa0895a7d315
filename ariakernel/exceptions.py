"""Exception hierarchy for ariakernel.

Expected runtime conditions (missing zone, stale item id, empty selection,
no active zone) are handled as silent no-ops and never raise. The exceptions
below signal programming defects or infrastructure failures.

Exception Hierarchy:
    AriaKernelError (base)
    ├── ZoneError - zone registry misuse
    │   └── DuplicateZoneError
    ├── CommandError - command definition and dispatch misuse
    │   └── TransactionError
    ├── ConfigurationError - settings/keybinding configuration issues
    └── PersistenceError - key-value store failures (retryable)

Usage:
    from ariakernel.exceptions import DuplicateZoneError

    try:
        registry.register("list", entry)
    except DuplicateZoneError as e:
        logger.error(f"Zone mounted twice: {e.context}")
"""

from typing import Any, Optional


class AriaKernelError(Exception):
    """Base exception for all ariakernel errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., zone ids, keys)
        retryable: Whether this error might succeed on retry
    """

    def __init__(
        self,
        message: str,
        *,
        retryable: bool = False,
        **context: Any,
    ) -> None:
        self.message = message
        self.context = context
        self.retryable = retryable
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Zone Errors
# =============================================================================


class ZoneError(AriaKernelError):
    """Base exception for zone registry misuse."""

    pass


class DuplicateZoneError(ZoneError):
    """Two different elements tried to claim the same zone id."""

    def __init__(
        self,
        message: str = "Zone id already mounted by another element",
        *,
        zone_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if zone_id is not None:
            context["zone_id"] = zone_id
        super().__init__(message, **context)


# =============================================================================
# Command Errors
# =============================================================================


class CommandError(AriaKernelError):
    """Base exception for command definition and dispatch misuse."""

    pass


class TransactionError(CommandError):
    """History transactions were closed more often than they were opened."""

    def __init__(
        self,
        message: str = "No history transaction is open",
        *,
        app_id: Optional[str] = None,
        **context: Any,
    ) -> None:
        if app_id is not None:
            context["app_id"] = app_id
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AriaKernelError):
    """Invalid settings or keybinding configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: Optional[str] = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


# =============================================================================
# Persistence Errors
# =============================================================================


class PersistenceError(AriaKernelError):
    """A key-value store could not read or write - retryable."""

    def __init__(
        self,
        message: str = "Persistence operation failed",
        *,
        key: Optional[str] = None,
        **context: Any,
    ) -> None:
        if key:
            context["key"] = key
        super().__init__(message, retryable=True, **context)
