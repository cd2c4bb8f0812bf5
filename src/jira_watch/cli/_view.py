"""View state for the interactive diff table.

Everything here is plain data and pure functions so it can be tested
without a terminal. The textual app in ``tui.py`` turns its own events into
the ``ViewEvent`` variants below, runs ``reduce`` and redraws from the
resulting ``ViewState``.

Row order: current issues newest-first by last update, then removed issues
at the bottom.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from rich.text import Text

from ..diff.models import DiffResult
from ..snapshot.models import Item

if TYPE_CHECKING:
    from ..service import WatchOutcome

COLUMNS: Tuple[str, ...] = ("Key", "Component", "Status", "Last Updated", "Labels", "Assignee")

# Share of the spare terminal width each column receives. Component and
# Labels hold the longest free text.
EXTRA_DISTRIBUTION: Dict[str, float] = {
    "Key": 0.05,
    "Component": 0.25,
    "Status": 0.05,
    "Last Updated": 0.05,
    "Labels": 0.45,
    "Assignee": 0.15,
}

CELL_PADDING = 4
RESERVED_WIDTH = 10  # borders + side margins
VISIBLE_ROWS = 15

STATUS_STYLES: Dict[str, str] = {
    "new": "bold green",
    "changed": "yellow",
    "removed": "dim strike",
    "unchanged": "",
}

STATUS_LABELS: Dict[str, str] = {
    "new": "NEW ITEM",
    "changed": "CHANGED ITEM",
    "removed": "REMOVED ITEM",
    "unchanged": "UNCHANGED ITEM",
}


# ══════════════════════════════════════════════════════════════════════════════
# Rows
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Row:
    """One table line: the issue, its change class and its cell texts."""

    item: Item
    status: str  # "new" | "changed" | "removed" | "unchanged"

    @property
    def key(self) -> str:
        return self.item.key

    @property
    def cells(self) -> Tuple[str, ...]:
        updated = self.item.last_updated.strftime("%Y-%m-%d") if self.item.last_updated else ""
        return (
            self.item.key,
            self.item.component,
            self.item.status,
            updated,
            self.item.rendered_labels,
            self.item.assignee,
        )


def _newest_first(item: Item) -> Tuple[bool, float]:
    if item.last_updated is None:
        return (True, 0.0)
    return (False, -item.last_updated.timestamp())


def build_rows(outcome: "WatchOutcome") -> List[Row]:
    """Current issues (newest update first) followed by removed issues."""
    diff = outcome.diff
    new_keys = {item.key for item in diff.new_issues}

    rows: List[Row] = []
    for item in sorted(outcome.record.issues, key=_newest_first):
        if item.key in new_keys:
            status = "new"
        elif item.key in diff.changed_issues:
            status = "changed"
        else:
            status = "unchanged"
        rows.append(Row(item=item, status=status))

    rows.extend(Row(item=item, status="removed") for item in diff.removed_issues)
    return rows


# ══════════════════════════════════════════════════════════════════════════════
# Column widths
# ══════════════════════════════════════════════════════════════════════════════


def content_widths(rows: List[Row]) -> Dict[str, int]:
    """Widest cell per column, never narrower than the header."""
    widths = {title: len(title) for title in COLUMNS}
    for row in rows:
        for title, cell in zip(COLUMNS, row.cells):
            widths[title] = max(widths[title], len(cell))
    return widths


def compute_column_widths(rows: List[Row], terminal_width: int) -> Dict[str, int]:
    """Fit columns to content, then hand out any spare width proportionally."""
    widths = {title: width + CELL_PADDING for title, width in content_widths(rows).items()}

    available = terminal_width - RESERVED_WIDTH
    extra = available - sum(widths.values())
    if extra > 0:
        for title in COLUMNS:
            widths[title] += int(extra * EXTRA_DISTRIBUTION[title])
    return widths


# ══════════════════════════════════════════════════════════════════════════════
# State machine
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ViewState:
    """Loading until rows arrive, then Ready for the rest of the session."""

    phase: str = "loading"  # "loading" | "ready"
    rows: Tuple[Row, ...] = ()
    cursor: int = 0
    width: int = 0
    height: int = 0
    column_widths: Dict[str, int] = field(default_factory=dict)

    @property
    def selected(self) -> Optional[Row]:
        if 0 <= self.cursor < len(self.rows):
            return self.rows[self.cursor]
        return None


@dataclass(frozen=True)
class Loaded:
    rows: Tuple[Row, ...]


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class CursorMoved:
    row: int


ViewEvent = Union[Loaded, Resized, CursorMoved]


def _on_loaded(state: ViewState, event: Loaded) -> ViewState:
    rows = tuple(event.rows)
    return replace(
        state,
        phase="ready",
        rows=rows,
        cursor=0,
        column_widths=compute_column_widths(list(rows), state.width),
    )


def _on_resized(state: ViewState, event: Resized) -> ViewState:
    return replace(
        state,
        width=event.width,
        height=event.height,
        column_widths=compute_column_widths(list(state.rows), event.width),
    )


def _on_cursor_moved(state: ViewState, event: CursorMoved) -> ViewState:
    if not state.rows:
        return replace(state, cursor=0)
    return replace(state, cursor=max(0, min(event.row, len(state.rows) - 1)))


_TRANSITIONS = {
    Loaded: _on_loaded,
    Resized: _on_resized,
    CursorMoved: _on_cursor_moved,
}


def reduce(state: ViewState, event: ViewEvent) -> ViewState:
    """Apply one event and return the next state."""
    return _TRANSITIONS[type(event)](state, event)


# ══════════════════════════════════════════════════════════════════════════════
# Text helpers
# ══════════════════════════════════════════════════════════════════════════════


def format_duration(delta: timedelta) -> str:
    """Compact age: 45s, 12m, 5h, 3d."""
    seconds = max(0, int(delta.total_seconds()))
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    if seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


def changes_since_text(since: Optional[datetime], now: Optional[datetime] = None) -> str:
    """``Changes since: 2025-01-01 12:00:00 (3h ago)``; empty without a baseline."""
    if since is None:
        return ""
    now = now or datetime.now(timezone.utc)
    local = since.astimezone()
    return f"Changes since: {local:%Y-%m-%d %H:%M:%S} ({format_duration(now - since)} ago)"


def summary_text(diff: DiffResult) -> str:
    """``Changes: 1 new, 2 changed, 0 removed``; empty when nothing changed."""
    if not diff.has_changes:
        return ""
    counts = diff.counts()
    return f"Changes: {counts['new']} new, {counts['changed']} changed, {counts['removed']} removed"


def scroll_hint(state: ViewState) -> str:
    if len(state.rows) > VISIBLE_ROWS:
        return f"Showing {VISIBLE_ROWS} of {len(state.rows)} items - use arrow keys to scroll"
    return ""


def styled_cells(row: Row) -> List[Text]:
    style = STATUS_STYLES[row.status]
    return [Text(cell, style=style) for cell in row.cells]


def render_detail(row: Optional[Row], diff: DiffResult) -> Text:
    """Side panel for the selected row: change class, field changes, summary."""
    text = Text()
    if row is None:
        return text

    label_style = STATUS_STYLES[row.status] or "grey70"
    text.append(STATUS_LABELS[row.status], style=f"bold {label_style}")
    text.append("\n")

    if row.status == "changed":
        for change in diff.changed_issues.get(row.key, []):
            text.append(
                f"  • {change.field} changed from '{change.old_value}' to '{change.new_value}'\n"
            )

    text.append("\n")
    text.append(f"Summary: {row.item.summary}", style="grey70")
    return text
