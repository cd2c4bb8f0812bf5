"""Data models for watch snapshots: tracker-agnostic issues and watch records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Item:
    """One issue as it looked when the query was fetched.

    Only plain values are kept so that change detection is attribute
    equality and the item can be written to YAML as is.
    """

    key: str
    summary: str = ""
    component: str = ""  # first component only
    status: str = ""
    last_updated: Optional[datetime] = None  # tracker's value, not fetch time
    labels: Tuple[str, ...] = ()
    assignee: str = ""  # display name, empty when unassigned

    @property
    def rendered_labels(self) -> str:
        return ", ".join(self.labels)


@dataclass(frozen=True)
class WatchSummary:
    """What ``list`` shows for a watch, without its issues."""

    name: str
    description: str
    jql: str
    last_fetched: Optional[datetime]
    issue_count: int


@dataclass
class WatchRecord:
    """The durable unit: a named query and the issues it returned last time.

    Overwritten wholesale on every successful refresh; there is no history
    beyond the most recent snapshot.
    """

    name: str
    jql: str
    description: str = ""
    last_fetched: Optional[datetime] = None  # None = never fetched
    issues: List[Item] = field(default_factory=list)

    def summary(self) -> WatchSummary:
        return WatchSummary(
            name=self.name,
            description=self.description,
            jql=self.jql,
            last_fetched=self.last_fetched,
            issue_count=len(self.issues),
        )
