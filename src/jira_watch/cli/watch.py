"""Watch command -- create or update a watch and show what changed."""

from typing import Optional

import typer

from . import app
from ._common import refresh_and_show


@app.command()
def watch(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name to store the query under"),
    jql: str = typer.Argument(..., help="JQL query to run"),
    description: Optional[str] = typer.Option(
        None,
        "--description",
        "-d",
        help="Short description (keeps the stored one when omitted)",
    ),
    no_tui: bool = typer.Option(
        False,
        "--no-tui",
        help="Print a table instead of opening the interactive view",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Run a JQL query, store the results and show changes since the last run.

    Re-running with an existing NAME replaces its query and compares the new
    results against the previously stored ones.

    [bold cyan]Examples:[/bold cyan]

      jira-watch watch my-bugs "assignee = currentUser()" -d "Bugs assigned to me"

      jira-watch watch ota-new "project = OTA AND status = New" --no-tui
    """
    refresh_and_show(
        ctx,
        lambda service: service.watch(name, jql, description),
        no_tui=no_tui,
        json_output=json_output,
    )
