"""
Error types for the LWW graph library.
"""

from typing import Any


class LWWGraphError(Exception):
    """Base class for all library errors."""


class NotFoundError(LWWGraphError, LookupError):
    """
    Raised when a timestamp is requested for an element that was never
    added (or never removed). Guard with add_exists()/remove_exists().
    """

    def __init__(self, element: Any, kind: str = "add"):
        self.element = element
        self.kind = kind
        super().__init__(f"No {kind} timestamp recorded for element {element!r}")


class CodecError(LWWGraphError, ValueError):
    """Raised when serialized replica state cannot be decoded."""


class TimestampError(LWWGraphError, TypeError):
    """Raised when a replica is handed state stamped with a foreign timestamp type."""

    def __init__(self, timestamp: Any):
        self.timestamp = timestamp
        super().__init__(
            f"Expected Timestamp values, got {type(timestamp).__name__} {timestamp!r}"
        )
