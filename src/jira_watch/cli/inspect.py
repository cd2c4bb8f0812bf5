"""Inspect command -- re-run a stored watch."""

import typer

from . import app
from ._common import refresh_and_show


@app.command()
def inspect(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of a stored query"),
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
    Re-run a stored query and show changes since it was last fetched.

    [bold cyan]Examples:[/bold cyan]

      jira-watch inspect my-bugs

      jira-watch inspect my-bugs --json
    """
    refresh_and_show(
        ctx,
        lambda service: service.inspect(name),
        no_tui=no_tui,
        json_output=json_output,
    )
