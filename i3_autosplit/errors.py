"""
Error handling for the i3 autosplit daemon.

Every I/O failure is fatal for the process lifetime: nothing here is retried.
Errors carry a structured code so the fatal log line can be grepped.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for the autosplit daemon.

    - 1100-1199: Configuration errors
    - 1400-1499: i3 IPC errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    CONFIG_INVALID = 1101

    # i3 IPC errors (1400-1499)
    CONNECTION_FAILED = 1400
    SUBSCRIBE_FAILED = 1401
    EVENT_STREAM_FAILED = 1410
    EVENT_STREAM_CLOSED = 1411
    TREE_FETCH_FAILED = 1420
    COMMAND_FAILED = 1430


class AutosplitError(Exception):
    """Base exception for autosplit daemon errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize autosplit error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a dictionary for structured logging.

        Returns:
            Error dictionary with code name, numeric code, message and context
        """
        result = {
            "error": self.code.name,
            "code": self.code.value,
            "message": self.message
        }

        if self.context:
            result["context"] = self.context

        return result


class IPCConnectionError(AutosplitError):
    """Failure to connect or subscribe to the window manager."""

    def __init__(self, message: str, socket_path: Optional[str] = None, subscribe: bool = False):
        context = {"socket_path": socket_path} if socket_path else {}
        code = ErrorCode.SUBSCRIBE_FAILED if subscribe else ErrorCode.CONNECTION_FAILED
        super().__init__(code, message, context)


class EventStreamError(AutosplitError):
    """The window event stream failed or ended."""

    def __init__(self, message: str, closed: bool = False, events_seen: Optional[int] = None):
        context = {"events_seen": events_seen} if events_seen is not None else {}
        code = ErrorCode.EVENT_STREAM_CLOSED if closed else ErrorCode.EVENT_STREAM_FAILED
        super().__init__(code, message, context)


class TreeFetchError(AutosplitError):
    """GET_TREE round trip failed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.TREE_FETCH_FAILED, message)


class CommandError(AutosplitError):
    """RUN_COMMAND round trip failed or i3 rejected the command."""

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(ErrorCode.COMMAND_FAILED, message, {"command": command})


class ConfigError(AutosplitError):
    """Configuration file could not be loaded or failed validation."""

    def __init__(self, message: str, path: Optional[str] = None, invalid: bool = False):
        context = {"path": path} if path else {}
        code = ErrorCode.CONFIG_INVALID if invalid else ErrorCode.CONFIG_LOAD_FAILED
        super().__init__(code, message, context)
