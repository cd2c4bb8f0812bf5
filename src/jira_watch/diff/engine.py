"""Diff engine: computes the delta between two issue lists.

The algorithm indexes both sides by issue key, then:
  1. new: keys only in the current list.
  2. removed: keys only in the previous list, keeping the previous values
     since those issues can no longer be fetched.
  3. changed: keys in both, checked field by field in TRACKED_FIELDS order.

``compare`` is total and pure; it never raises for well-formed items.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..snapshot.models import Item
from ..snapshot.serialize import format_timestamp
from .models import TRACKED_FIELDS, DiffResult, FieldChange

Renderer = Callable[[Item], str]
Equality = Callable[[Item, Item], bool]


def _render_timestamp(item: Item) -> str:
    return format_timestamp(item.last_updated) or ""


def _same_timestamp(current: Item, previous: Item) -> bool:
    # Exact instant equality, no tolerance.
    return current.last_updated == previous.last_updated


def _same_labels(current: Item, previous: Item) -> bool:
    return set(current.labels) == set(previous.labels)


# field -> (renderer, equality). None equality means "rendered text differs".
_FIELD_RULES: Dict[str, Tuple[Renderer, Optional[Equality]]] = {
    "summary": (lambda i: i.summary, None),
    "component": (lambda i: i.component, None),
    "status": (lambda i: i.status, None),
    "assignee": (lambda i: i.assignee, None),
    "last_updated": (_render_timestamp, _same_timestamp),
    "labels": (lambda i: i.rendered_labels, _same_labels),
}


def _index(items: Iterable[Item]) -> Dict[str, Item]:
    # Later duplicates win.
    return {item.key: item for item in items}


def compare_items(current: Item, previous: Item) -> List[FieldChange]:
    """Field-level changes between two versions of the same issue."""
    changes: List[FieldChange] = []
    for field_name in TRACKED_FIELDS:
        render, equal = _FIELD_RULES[field_name]
        old_text = render(previous)
        new_text = render(current)
        same = equal(current, previous) if equal is not None else old_text == new_text
        if not same:
            changes.append(FieldChange(field=field_name, old_value=old_text, new_value=new_text))
    return changes


def compare(current: List[Item], previous: List[Item]) -> DiffResult:
    """Compute the delta between the current and previous issue lists.

    Args:
        current: Issues returned by the query now.
        previous: Issues stored by the last refresh (empty for a new watch).

    Returns:
        A DiffResult with new, removed and changed issues.
    """
    current_by_key = _index(current)
    previous_by_key = _index(previous)

    new_issues = [item for key, item in current_by_key.items() if key not in previous_by_key]
    removed_issues = [item for key, item in previous_by_key.items() if key not in current_by_key]

    changed_issues: Dict[str, List[FieldChange]] = {}
    for key, current_item in current_by_key.items():
        previous_item = previous_by_key.get(key)
        if previous_item is None:
            continue
        changes = compare_items(current_item, previous_item)
        if changes:
            changed_issues[key] = changes

    return DiffResult(
        new_issues=new_issues,
        removed_issues=removed_issues,
        changed_issues=changed_issues,
    )
