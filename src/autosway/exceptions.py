"""
Common exception classes for autosway.

Provides domain-specific exceptions for consistent error handling across modules.
All exceptions inherit from AutoswayError for unified catching at CLI level.
"""


class AutoswayError(Exception):
    """
    Base exception for all autosway errors.

    All domain-specific exceptions inherit from this class, allowing
    callers to catch all autosway errors with a single except clause.
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(AutoswayError):
    """
    Configuration-related errors.

    Raised when:
    - Config file is malformed or has unknown sections/keys
    - The compositor socket path cannot be determined
    """
    pass


class ConfigValidationError(ConfigError):
    """
    Config value validation failed.

    Raised when a config value is present but invalid (e.g., unknown log level).
    """
    pass


# ============================================================================
# IPC Errors
# ============================================================================

class IpcError(AutoswayError):
    """
    Compositor IPC errors.

    Base class for everything that can go wrong while talking to the
    compositor socket. None of these are retried.
    """
    pass


class IpcConnectionError(IpcError):
    """
    Cannot connect to the compositor.

    Raised when the socket path does not exist or refuses connections.
    """
    pass


class IpcProtocolError(IpcError):
    """
    Compositor sent something that is not an i3-ipc frame.

    Usually means the socket belongs to another program or protocol version.
    """
    pass


class InvalidPreambleError(IpcProtocolError):
    """Response header does not start with the i3-ipc magic string."""
    pass


class IpcIOError(IpcError):
    """
    Stream failure while writing a request or reading a response.

    Raised on socket errors and when the peer closes before a full
    frame was read.
    """
    pass


# ============================================================================
# Data Errors
# ============================================================================

class SerializationError(AutoswayError):
    """
    Malformed JSON or unexpected record shape.

    Raised for the compositor's output report, command results, and
    stored layout files alike.
    """
    pass


class StorageError(AutoswayError):
    """
    Layout storage errors.

    Raised when reading or writing stored layouts fails.
    """
    pass


class LayoutNotFoundError(StorageError):
    """No layout is stored under the requested fingerprint."""
    pass


class StoragePathError(StorageError):
    """Storage key cannot be resolved to a file inside the layouts directory."""
    pass


# ============================================================================
# Layout Errors
# ============================================================================

class ReconciliationError(AutoswayError):
    """
    Incompatible layout.

    Raised when a connected output has no counterpart in the stored layout.
    """
    pass


class CommandFailedError(AutoswayError):
    """
    Compositor rejected a configuration command.

    Commands applied before the failing one are left in place.
    """

    def __init__(self, command: str, reason: str = "") -> None:
        self.command = command
        self.reason = reason
        message = f"Compositor rejected command: {command}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
