"""
Error types for Pathfinder.

Every filesystem command raises one of these at its boundary so the
command loop can report it on a single line and carry on.
"""

from typing import Optional


class ExplorerError(Exception):
    """Base class for all errors reported by the explorer."""

    def __init__(self, message: str, reason: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class AccessError(ExplorerError):
    """A directory could not be opened for listing."""


class NotFoundError(ExplorerError):
    """A navigation target is missing or is not a directory."""


class CreateError(ExplorerError):
    """A directory could not be created."""


class RemoveError(ExplorerError):
    """An entry could not be removed."""


class CopyError(ExplorerError):
    """A copy failed."""


class MoveError(ExplorerError):
    """A move or rename failed."""


class UsageError(ExplorerError):
    """A command line was malformed."""
