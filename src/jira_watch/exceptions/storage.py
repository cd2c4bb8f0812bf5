"""Snapshot storage exceptions: unknown watches, unreadable or unwritable records."""

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .base import JiraWatchError

if TYPE_CHECKING:
    from ..service import WatchOutcome


class StorageError(JiraWatchError):
    """Raised when a snapshot file cannot be read or written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        details = {"path": str(path)} if path is not None else None
        super().__init__(message, details=details)
        self.path = path


class NotFoundError(StorageError):
    """Raised when an operation names a watch that has never been stored."""

    def __init__(self, name: str):
        super().__init__(f"Query '{name}' not found")
        self.name = name


class InvalidWatchNameError(StorageError):
    """Raised when a watch name cannot be used as a record address."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid query name '{name}': {reason}")
        self.name = name
        self.reason = reason


class SnapshotNotSavedError(StorageError):
    """Raised when the fetch and diff succeeded but the new snapshot was not written.

    ``outcome`` holds the computed result so callers can still show it.
    """

    def __init__(self, outcome: "WatchOutcome", cause: StorageError):
        super().__init__(f"Snapshot was not saved: {cause.message}", path=cause.path)
        self.outcome = outcome
        self.cause = cause
