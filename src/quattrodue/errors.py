"""
Error Taxonomy
==============
Exceptions raised by the pattern engine and the calendar model.

    ConfigurationError  malformed cycle table or shift catalog, fatal at construction
    InvalidIndexError   out-of-range shift or cycle index (caller contract violation)
    UnknownTeamError    team code outside the registry
    AssignmentError     a team assigned twice on the same day

Not-found outcomes (no working day within the scan horizon, date outside
any cached range) are returned as ``None``, never raised.
"""
from typing import Optional


class QuattroDueError(Exception):
    """Base exception for the schedule engine."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    def __str__(self) -> str:
        if self.operation:
            return f"{self.message} (operation: {self.operation})"
        return self.message


class ConfigurationError(QuattroDueError):
    """The engine cannot start with the given table or shift types."""


class InvalidIndexError(QuattroDueError, IndexError):
    """A shift or cycle index outside its valid range."""

    def __init__(self, index: int, size: int, what: str = "index"):
        super().__init__(f"{what} {index} out of range [0, {size})")
        self.index = index
        self.size = size


class UnknownTeamError(QuattroDueError, ValueError):
    """Team code not present in the registry."""

    def __init__(self, code: object):
        super().__init__(f"Unknown team: {code!r}")
        self.code = code


class AssignmentError(QuattroDueError, ValueError):
    """A team would appear in more than one shift of the same day."""
