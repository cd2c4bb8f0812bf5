"""Watch orchestration: fetch → load previous → diff → persist.

Every refresh follows the same linear pipeline. A failure before the
write leaves the stored snapshot untouched, so a tracker outage never
corrupts a watch. The core never retries; a stale watch is acceptable, a
half-updated one is not.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol

from .diff.engine import compare
from .diff.models import DiffResult
from .exceptions import NotFoundError, SnapshotNotSavedError, StorageError
from .logging_config import get_logger
from .snapshot.models import Item, WatchRecord, WatchSummary
from .storage.store import SnapshotStore, slugify

logger = get_logger(__name__)


class ItemFetcher(Protocol):
    """What the orchestrator needs from a tracker client."""

    def validate(self, jql: str) -> None: ...

    def search(self, jql: str) -> List[Item]: ...


@dataclass
class WatchOutcome:
    """Result of one refresh.

    ``since`` is the previous record's fetch time, i.e. the baseline the
    diff was computed against, not the time just written. None for a
    first-time watch.
    """

    record: WatchRecord
    diff: DiffResult
    since: Optional[datetime]
    persisted: bool = True

    @property
    def is_empty(self) -> bool:
        """Nothing to show: no current issues and nothing removed."""
        return not self.record.issues and not self.diff.removed_issues


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchService:
    """Ties a fetcher and a snapshot store together.

    Args:
        fetcher: Tracker client (``JiraClient`` or any ``ItemFetcher``).
        store: Snapshot store.
        clock: Source of the ``last_fetched`` timestamp.
    """

    def __init__(
        self,
        fetcher: ItemFetcher,
        store: SnapshotStore,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.fetcher = fetcher
        self.store = store
        self.clock = clock

    # ── refresh operations ────────────────────────────────────────

    def watch(self, name: str, jql: str, description: Optional[str] = None) -> WatchOutcome:
        """Create a watch or update an existing one, then refresh it.

        Args:
            name: Watch name.
            jql: Query to store and run.
            description: New description. None keeps the stored one.

        Raises:
            InvalidWatchNameError: If the name is empty (the tracker is not called)
            QueryError: If the query is rejected (nothing is written)
            TransportError: If the tracker is unreachable (nothing is written)
            SnapshotNotSavedError: If the new snapshot could not be written
            StorageError: If the existing record cannot be read
        """
        slugify(name)  # reject bad names before any tracker call
        self.fetcher.validate(jql)
        current = self.fetcher.search(jql)

        previous = self.store.load(name)
        if description is None:
            description = previous.description if previous is not None else ""

        return self._refresh(name, jql, description, current, previous)

    def inspect(self, name: str) -> WatchOutcome:
        """Refresh an existing watch using its stored query.

        Raises:
            NotFoundError: If no watch is stored under ``name`` (nothing is written)
            QueryError: If the stored query is now rejected
            TransportError: If the tracker is unreachable
            SnapshotNotSavedError: If the new snapshot could not be written
        """
        previous = self.store.load(name)
        if previous is None:
            raise NotFoundError(name)

        current = self.fetcher.search(previous.jql)
        return self._refresh(previous.name, previous.jql, previous.description, current, previous)

    def _refresh(
        self,
        name: str,
        jql: str,
        description: str,
        current: List[Item],
        previous: Optional[WatchRecord],
    ) -> WatchOutcome:
        previous_items = previous.issues if previous is not None else []
        since = previous.last_fetched if previous is not None else None

        diff = compare(current, previous_items)
        counts = diff.counts()
        logger.info(
            "Query '%s': %d issues, %d new, %d changed, %d removed",
            name, len(current), counts["new"], counts["changed"], counts["removed"],
        )

        record = WatchRecord(
            name=name,
            jql=jql,
            description=description,
            last_fetched=self.clock(),
            issues=list(current),
        )
        outcome = WatchOutcome(record=record, diff=diff, since=since)

        try:
            self.store.save(record)
        except StorageError as e:
            raise SnapshotNotSavedError(replace(outcome, persisted=False), e) from e

        return outcome

    # ── management ────────────────────────────────────────────────

    def list_watches(self) -> List[WatchSummary]:
        return self.store.list_all()

    def delete_watch(self, name: str) -> bool:
        """Delete a watch; succeeds whether or not it existed.

        Returns:
            True if a stored record was removed.
        """
        return self.store.delete(name)

    def watch_exists(self, name: str) -> bool:
        return self.store.exists(name)
