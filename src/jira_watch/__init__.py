"""
jira-watch - track how the result set of a Jira query changes over time.

A watch binds a name to a JQL query and remembers the issues it returned
the last time it ran. Every later run fetches the query again, reports
which issues appeared, disappeared or changed, and stores the new result
set as the next baseline.
"""

__version__ = "0.1.0"
__author__ = "jira-watch contributors"

from .diff.engine import compare
from .diff.models import DiffResult, FieldChange
from .service import WatchOutcome, WatchService
from .snapshot.models import Item, WatchRecord, WatchSummary

__all__ = [
    "compare",  # Diff two item lists
    "WatchService",  # Fetch/diff/persist orchestration
    "WatchOutcome",
    "DiffResult",
    "FieldChange",
    "Item",
    "WatchRecord",
    "WatchSummary",
]
