"""jira-watch TUI - one keyboard-driven table over a refresh result.

Layout:
┌─────────────────────────────────────────────────────────────────────┐
│ Query: my-bugs                                                      │
│ Bugs assigned to me                                                 │
│ Changes since: 2025-01-01 12:00:00 (3h ago)                         │
│ Changes: 1 new, 2 changed, 0 removed                                │
├──────────────────────────────────────────────┬──────────────────────┤
│ Key     Component  Status  Last Updated ...  │ CHANGED ITEM         │
│ OTA-12  Installer  New     2025-01-01   ...  │  • status changed …  │
│ ...                                          │                      │
├──────────────────────────────────────────────┴──────────────────────┤
│ q Quit  j Down  k Up                                                │
└─────────────────────────────────────────────────────────────────────┘

Read-only: the app never touches the store or the tracker. All state
changes go through ``_view.reduce``.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Static

from ._view import (
    COLUMNS,
    CursorMoved,
    Loaded,
    Resized,
    ViewEvent,
    ViewState,
    build_rows,
    changes_since_text,
    reduce,
    render_detail,
    scroll_hint,
    styled_cells,
    summary_text,
)

if TYPE_CHECKING:
    from ..service import WatchOutcome


_CURSOR_CLASSES = {
    "new": "cursor-new",
    "changed": "cursor-changed",
    "removed": "cursor-removed",
    "unchanged": "cursor-unchanged",
}


class WatchApp(App):
    """Interactive view of one watch refresh."""

    TITLE = "jira-watch"

    CSS = """
    Screen {
        background: $surface;
    }

    #header-bar {
        dock: top;
        height: auto;
        padding: 0 2;
        background: $primary-background;
    }

    #query-title {
        text-style: bold;
        color: #ff00ff;
    }

    #query-description {
        color: $text-muted;
        text-style: italic;
    }

    #changes-since, #scroll-hint {
        color: $text-muted;
    }

    #change-summary {
        color: #1e90ff;
    }

    #body {
        height: 1fr;
        padding: 1 2;
    }

    #issues-table {
        width: 3fr;
        height: auto;
        max-height: 100%;
    }

    #detail-panel {
        width: 1fr;
        min-width: 30;
        padding: 0 1;
        border-left: solid $primary;
    }

    .hidden {
        display: none;
    }

    DataTable.cursor-new > .datatable--cursor {
        background: #006400;
        color: #ffffe0;
        text-style: bold;
    }

    DataTable.cursor-changed > .datatable--cursor {
        background: #ff8c00;
        color: #ffffe0;
        text-style: bold;
    }

    DataTable.cursor-removed > .datatable--cursor {
        background: #8b0000;
        color: #ffffe0;
        text-style: bold;
    }

    DataTable.cursor-unchanged > .datatable--cursor {
        background: $panel;
        color: #ffffe0;
        text-style: bold;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False),
        Binding("j", "cursor_down", "Down"),
        Binding("k", "cursor_up", "Up"),
    ]

    def __init__(self, outcome: WatchOutcome) -> None:
        super().__init__()
        self.outcome = outcome
        self.view_state = ViewState()

    def compose(self) -> ComposeResult:
        record = self.outcome.record
        with Container(id="header-bar"):
            yield Static(f"Query: {record.name}", id="query-title", markup=False)
            yield Static(
                record.description,
                id="query-description",
                classes="" if record.description else "hidden",
                markup=False,
            )
            since = changes_since_text(self.outcome.since)
            yield Static(since, id="changes-since", classes="" if since else "hidden")
            summary = summary_text(self.outcome.diff)
            yield Static(summary, id="change-summary", classes="" if summary else "hidden")

        with Horizontal(id="body"):
            table: DataTable = DataTable(id="issues-table", cursor_type="row", zebra_stripes=True)
            yield table
            yield Static("Loading…", id="detail-panel")

        yield Static("", id="scroll-hint", classes="hidden")
        yield Footer()

    def on_mount(self) -> None:
        self.apply_event(Resized(self.size.width, self.size.height))
        self.apply_event(Loaded(tuple(build_rows(self.outcome))))
        self.query_one("#issues-table", DataTable).focus()

    # ── event translation ─────────────────────────────────────────

    def on_resize(self, event: events.Resize) -> None:
        self.apply_event(Resized(event.size.width, event.size.height))

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.cursor_row != self.view_state.cursor:
            self.apply_event(CursorMoved(event.cursor_row))

    def action_cursor_down(self) -> None:
        self.query_one("#issues-table", DataTable).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#issues-table", DataTable).action_cursor_up()

    # ── state → widgets ───────────────────────────────────────────

    def apply_event(self, event: ViewEvent) -> None:
        previous = self.view_state
        self.view_state = reduce(previous, event)
        if self.view_state.phase != "ready":
            return
        if isinstance(event, (Loaded, Resized)) and (
            previous.column_widths != self.view_state.column_widths or isinstance(event, Loaded)
        ):
            self._rebuild_table()
        self._update_detail()

    def _rebuild_table(self) -> None:
        """Columns cannot be resized in place; re-add them with the new widths."""
        table = self.query_one("#issues-table", DataTable)
        cursor = self.view_state.cursor
        table.clear(columns=True)
        for title in COLUMNS:
            table.add_column(title, width=self.view_state.column_widths[title], key=title)
        for row in self.view_state.rows:
            table.add_row(*styled_cells(row))
        if self.view_state.rows:
            table.move_cursor(row=cursor)

        hint = self.query_one("#scroll-hint", Static)
        text = scroll_hint(self.view_state)
        hint.update(text)
        hint.set_class(not text, "hidden")

    def _update_detail(self) -> None:
        selected = self.view_state.selected
        panel = self.query_one("#detail-panel", Static)
        panel.update(render_detail(selected, self.outcome.diff))

        table = self.query_one("#issues-table", DataTable)
        for status, css_class in _CURSOR_CLASSES.items():
            table.set_class(selected is not None and selected.status == status, css_class)


# ══════════════════════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════════════════════


def run_tui(outcome: WatchOutcome, console: Optional[Console] = None) -> None:
    """Show the outcome interactively; requires a terminal."""
    console = console or Console()

    if not sys.stdin.isatty():
        console.print("[red]TUI requires interactive terminal. Use --no-tui.[/]")
        raise SystemExit(1)

    app = WatchApp(outcome)
    try:
        app.run()
    except KeyboardInterrupt:
        console.print("\n[dim]Exited.[/]")
