# Pathfinder - Core Module
"""
Core infrastructure for the Pathfinder terminal file explorer.
This module provides the error types, settings and audit log that the
explorer modules depend on.
"""

from .config import Settings
from .errors import (
    ExplorerError,
    AccessError,
    NotFoundError,
    CreateError,
    RemoveError,
    CopyError,
    MoveError,
    UsageError,
)
from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus

__all__ = [
    "Settings",
    "ExplorerError",
    "AccessError",
    "NotFoundError",
    "CreateError",
    "RemoveError",
    "CopyError",
    "MoveError",
    "UsageError",
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
]

__version__ = "0.1.0"
