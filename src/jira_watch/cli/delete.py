"""Delete command -- forget a stored watch."""

import typer
from rich.markup import escape

from ..exceptions import JiraWatchError
from . import app
from ._common import console, fail, open_service


@app.command()
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the stored query"),
):
    """
    Delete a stored query. Deleting a query that does not exist is not an error.

    [bold cyan]Examples:[/bold cyan]

      jira-watch delete my-bugs
    """
    try:
        with open_service(ctx) as service:
            removed = service.delete_watch(name)
    except JiraWatchError as e:
        fail(str(e))

    if removed:
        console.print(f"[green]Deleted query '{escape(name)}'[/green]")
    else:
        console.print(f"[dim]No stored query named '{escape(name)}'[/dim]")
