"""Data models for snapshot diffing: field-level changes and the overall delta."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..snapshot.models import Item

# Fields compared for issues present in both snapshots, in comparison order.
TRACKED_FIELDS: Tuple[str, ...] = (
    "summary",
    "component",
    "status",
    "assignee",
    "last_updated",
    "labels",
)


@dataclass(frozen=True)
class FieldChange:
    """One attribute of one issue that differs between snapshots."""

    field: str  # one of TRACKED_FIELDS
    old_value: str  # rendered text
    new_value: str


@dataclass
class DiffResult:
    """Complete delta between two snapshots.

    Unchanged issues appear nowhere. A key is in at most one of
    ``new_issues`` / ``removed_issues`` and only in ``changed_issues``
    when it is in neither. No ordering is guaranteed; renderers sort.
    """

    new_issues: List[Item] = field(default_factory=list)
    removed_issues: List[Item] = field(default_factory=list)  # last-known values
    changed_issues: Dict[str, List[FieldChange]] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.new_issues or self.removed_issues or self.changed_issues)

    def is_new(self, key: str) -> bool:
        return any(item.key == key for item in self.new_issues)

    def is_removed(self, key: str) -> bool:
        return any(item.key == key for item in self.removed_issues)

    def is_changed(self, key: str) -> bool:
        return key in self.changed_issues

    def status_of(self, key: str) -> str:
        """Return 'new', 'changed', 'removed' or 'unchanged'."""
        if self.is_new(key):
            return "new"
        if self.is_changed(key):
            return "changed"
        if self.is_removed(key):
            return "removed"
        return "unchanged"

    def counts(self) -> Dict[str, int]:
        return {
            "new": len(self.new_issues),
            "changed": len(self.changed_issues),
            "removed": len(self.removed_issues),
        }
