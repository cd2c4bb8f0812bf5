"""Non-interactive rendering of a refresh result.

Used when ``--no-tui`` is given, when stdin is not a terminal, and for
``--json``. Rows come from the same ``build_rows`` the TUI uses so both
views agree on ordering and change classes.
"""

import json
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..service import WatchOutcome
from ..snapshot.serialize import format_timestamp, item_to_dict
from ._view import (
    COLUMNS,
    STATUS_LABELS,
    STATUS_STYLES,
    build_rows,
    changes_since_text,
    summary_text,
)


class OutcomeFormatter:
    """Render a WatchOutcome to a Rich console.

    Usage::

        formatter = OutcomeFormatter()
        formatter.render(outcome)                # rich table
        formatter.render(outcome, fmt="json")    # machine-readable JSON
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def render(self, outcome: WatchOutcome, fmt: str = "rich") -> None:
        if fmt == "json":
            print(json.dumps(outcome_to_dict(outcome), indent=2))
        else:
            self._render_rich(outcome)

    # ── Rich terminal output ─────────────────────────────────────────────

    def _render_rich(self, outcome: WatchOutcome) -> None:
        con = self._console
        record = outcome.record

        con.print()
        con.print(Text(f"Query: {record.name}", style="bold magenta"))
        if record.description:
            con.print(Text(record.description, style="italic dim"))
        since = changes_since_text(outcome.since)
        if since:
            con.print(Text(since, style="dim"))
        summary = summary_text(outcome.diff)
        if summary:
            con.print(Text(summary, style="dodger_blue1"))
        con.print()

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        for title in COLUMNS:
            table.add_column(title)
        table.add_column("Change")

        for row in build_rows(outcome):
            style = STATUS_STYLES[row.status]
            change = "" if row.status == "unchanged" else STATUS_LABELS[row.status].split()[0]
            table.add_row(*(Text(cell) for cell in row.cells), change, style=style or None)
        con.print(table)

        changed = outcome.diff.changed_issues
        if changed:
            con.print()
            for key in sorted(changed):
                con.print(Text(key, style="yellow bold"))
                for change in changed[key]:
                    con.print(
                        Text(
                            f"  • {change.field} changed from "
                            f"'{change.old_value}' to '{change.new_value}'"
                        )
                    )
        con.print()


# ── JSON ─────────────────────────────────────────────────────────────────────


def outcome_to_dict(outcome: WatchOutcome) -> Dict[str, Any]:
    """JSON-ready view of a refresh: the stored record plus the diff."""
    record = outcome.record
    diff = outcome.diff
    return {
        "name": record.name,
        "jql": record.jql,
        "description": record.description,
        "last_fetched": format_timestamp(record.last_fetched),
        "since": format_timestamp(outcome.since),
        "persisted": outcome.persisted,
        "issues": [
            dict(item_to_dict(row.item), change=row.status) for row in build_rows(outcome)
        ],
        "changes": {
            key: [
                {"field": c.field, "old": c.old_value, "new": c.new_value} for c in changes
            ]
            for key, changes in sorted(diff.changed_issues.items())
        },
        "counts": diff.counts(),
    }
