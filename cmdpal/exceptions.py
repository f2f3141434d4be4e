"""Custom exception hierarchy for cmdpal.

Exception Hierarchy:
    CmdpalError (base)
    ├── ConfigurationError - Settings/environment issues
    ├── StoreError - Store wiring and state updates
    │   ├── StoreNotProvidedError
    │   └── InvalidPatchError
    ├── StorageError - Key-value persistence backends
    └── CommandNotFoundError - Unknown palette command ids

Only wiring mistakes (a missing store, a malformed patch, an unknown command)
are raised to callers. Persistence faults are raised by storage backends and
absorbed by the persistence adapter, which logs them instead.

Usage:
    from cmdpal.exceptions import StorageError

    try:
        raw = path.read_text()
    except OSError as e:
        raise StorageError("Failed to read storage file", path=str(path)) from e
"""

from typing import Any


class CmdpalError(Exception):
    """Base exception for all cmdpal errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (e.g., keys, paths)
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


class ConfigurationError(CmdpalError):
    """Invalid settings or environment configuration."""

    def __init__(
        self,
        message: str = "Configuration error",
        *,
        setting: str | None = None,
        **context: Any,
    ) -> None:
        if setting:
            context["setting"] = setting
        super().__init__(message, **context)


# =============================================================================
# Store Errors
# =============================================================================


class StoreError(CmdpalError):
    """Base exception for store wiring and state updates."""

    pass


class StoreNotProvidedError(StoreError):
    """A palette component was used without a store handed to it."""

    def __init__(self, consumer: str = "component", **context: Any) -> None:
        message = (
            f"{consumer} used outside a command palette: no store was provided. "
            "Create one with create_store() and pass it through StoreContext "
            "to every palette component"
        )
        super().__init__(message, **context)


class InvalidPatchError(StoreError):
    """A state patch or view mapping named fields that do not exist."""

    def __init__(self, fields: list[str], target: str = "snapshot", **context: Any) -> None:
        self.fields = fields
        self.target = target
        super().__init__(f"Unknown {target} fields in patch: {', '.join(fields)}", **context)


# =============================================================================
# Storage Errors
# =============================================================================


class StorageError(CmdpalError):
    """A key-value storage backend failed to read or write."""

    def __init__(self, message: str = "Storage operation failed", **context: Any) -> None:
        super().__init__(message, **context)


# =============================================================================
# Command Errors
# =============================================================================


class CommandNotFoundError(CmdpalError):
    """No command is registered under the requested id."""

    def __init__(self, command_id: str, **context: Any) -> None:
        self.command_id = command_id
        super().__init__(f"Command not found: {command_id}", command_id=command_id, **context)
