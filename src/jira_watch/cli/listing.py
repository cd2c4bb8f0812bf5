"""List command -- show every stored watch."""

import json

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import JiraWatchError
from ..snapshot.serialize import format_timestamp
from . import app
from ._common import console, fail, open_service


@app.command("list")
def list_queries(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List stored queries with their description, size and last fetch time.

    [bold cyan]Examples:[/bold cyan]

      jira-watch list

      jira-watch list --json
    """
    try:
        with open_service(ctx) as service:
            summaries = service.list_watches()
    except JiraWatchError as e:
        fail(str(e))

    if json_output:
        output = [
            {
                "name": s.name,
                "description": s.description,
                "jql": s.jql,
                "last_fetched": format_timestamp(s.last_fetched),
                "issue_count": s.issue_count,
            }
            for s in summaries
        ]
        print(json.dumps(output, indent=2))
        return

    if not summaries:
        console.print("No stored queries found")
        return

    table = Table(title="Stored Queries", show_lines=False)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Issues", justify="right")
    table.add_column("Last Fetched", style="dim")

    for s in summaries:
        fetched = (
            s.last_fetched.astimezone().strftime("%Y-%m-%d %H:%M") if s.last_fetched else "never"
        )
        table.add_row(escape(s.name), escape(s.description), str(s.issue_count), fetched)

    console.print(table)
