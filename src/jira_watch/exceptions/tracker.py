"""Issue tracker exceptions: rejected queries and unreachable endpoints."""

from typing import List, Optional

from .base import JiraWatchError


class TrackerError(JiraWatchError):
    """Base class for failures talking to the issue tracker."""

    pass


class QueryError(TrackerError):
    """Raised when the tracker rejects a JQL expression.

    The tracker's own messages are kept verbatim in ``messages`` so the
    user can correct the query.
    """

    def __init__(self, jql: str, messages: Optional[List[str]] = None):
        self.jql = jql
        self.messages = list(messages or [])
        text = "; ".join(self.messages) if self.messages else "query rejected by tracker"
        super().__init__(f"Invalid JQL query: {text}", details={"jql": jql})


class TransportError(TrackerError):
    """Raised on network, authentication or protocol failures."""

    def __init__(self, reason: str, url: Optional[str] = None, status_code: Optional[int] = None):
        details = {}
        if url:
            details["url"] = url
        if status_code is not None:
            details["status"] = str(status_code)
        super().__init__(f"Cannot reach tracker: {reason}", details=details)
        self.reason = reason
        self.url = url
        self.status_code = status_code
