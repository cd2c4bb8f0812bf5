"""Exception hierarchy for jira-watch."""

from .base import JiraWatchError
from .config import ConfigurationError
from .storage import (
    InvalidWatchNameError,
    NotFoundError,
    SnapshotNotSavedError,
    StorageError,
)
from .tracker import QueryError, TrackerError, TransportError

__all__ = [
    "JiraWatchError",
    "ConfigurationError",
    "TrackerError",
    "QueryError",
    "TransportError",
    "StorageError",
    "NotFoundError",
    "InvalidWatchNameError",
    "SnapshotNotSavedError",
]
