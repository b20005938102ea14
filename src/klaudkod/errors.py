"""Exception hierarchy for klaudkod."""

from __future__ import annotations


class KlaudkodError(Exception):
    """Base exception for this project."""


class ConfigError(KlaudkodError):
    """Raised when a configuration file is invalid."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class TransportStateError(KlaudkodError):
    """Raised when the transport life cycle is driven out of order."""


class DuplicateToolCallError(KlaudkodError):
    """Raised when a tool call id is already in the active set."""

    def __init__(self, tool_call_id: str):
        super().__init__(f"tool call {tool_call_id!r} is already active")
        self.tool_call_id = tool_call_id
