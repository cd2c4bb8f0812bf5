"""Top-level options shared by every command."""

from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..config import load_config
from ..exceptions import ConfigurationError
from ..logging_config import setup_logging
from . import app
from ._common import console, fail


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"jira-watch {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    jira_endpoint: Optional[str] = typer.Option(
        None,
        "--jira-endpoint",
        help="Jira base URL (default: https://issues.redhat.com)",
    ),
    jira_token_file: Optional[Path] = typer.Option(
        None,
        "--jira-token-file",
        help="File holding a Jira bearer token (default: <config dir>/ota/jira-token)",
        dir_okay=False,
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory for stored queries (default: <data dir>/ota/jira-queries)",
        file_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        hidden=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every tracker request and store write",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Watch a JQL query and see what changed since the last time you looked.

    [bold cyan]Examples:[/bold cyan]

      jira-watch watch my-bugs "assignee = currentUser() AND resolution = Unresolved"

      jira-watch inspect my-bugs --no-tui

      jira-watch list
    """
    try:
        settings = load_config(
            config_file=config,
            jira_endpoint=jira_endpoint,
            bearer_token_file=str(jira_token_file) if jira_token_file else None,
            data_dir=str(data_dir) if data_dir else None,
            verbose=verbose,
            quiet=quiet,
        )
    except ConfigurationError as e:
        fail(str(e))

    setup_logging(settings.verbosity, log_file=settings.log_file)
    ctx.obj = {"config": settings}

