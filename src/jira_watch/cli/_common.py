"""Shared CLI helpers."""

import sys
from contextlib import contextmanager
from typing import Callable, Iterator, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from ..config import WatchConfig
from ..exceptions import JiraWatchError, SnapshotNotSavedError
from ..service import WatchOutcome, WatchService
from ..storage import SnapshotStore
from ..tracker import JiraClient
from ._diff_output import OutcomeFormatter

console = Console()


def get_config(ctx: typer.Context) -> WatchConfig:
    """Configuration built by the top-level callback."""
    return ctx.obj["config"]


@contextmanager
def open_service(ctx: typer.Context) -> Iterator[WatchService]:
    """Service wired to the configured tracker and data directory.

    The HTTP connection pool is closed when the block exits.
    """
    config = get_config(ctx)
    with JiraClient(config) as client:
        yield WatchService(client, SnapshotStore(config.queries_dir))


def fail(message: str) -> NoReturn:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


def refresh_and_show(
    ctx: typer.Context,
    refresh: Callable[[WatchService], WatchOutcome],
    no_tui: bool,
    json_output: bool,
) -> None:
    """Run one refresh and present the result.

    A snapshot that could not be written is still shown, then the command
    exits with status 1.
    """
    try:
        with open_service(ctx) as service:
            outcome = refresh(service)
    except SnapshotNotSavedError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        show_outcome(e.outcome, no_tui=True, json_output=json_output)
        raise typer.Exit(1)
    except JiraWatchError as e:
        fail(str(e))

    show_outcome(outcome, no_tui=no_tui, json_output=json_output)


def show_outcome(outcome: WatchOutcome, no_tui: bool, json_output: bool) -> None:
    if json_output:
        OutcomeFormatter(console).render(outcome, fmt="json")
        return

    if outcome.is_empty:
        console.print(f"No issues found matching query '{escape(outcome.record.name)}'")
        return

    if no_tui or not sys.stdin.isatty():
        OutcomeFormatter(console).render(outcome)
        return

    from .tui import run_tui

    run_tui(outcome, console=console)
