"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="jira-watch",
    help="jira-watch - track how the results of a saved JQL query change over time",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .watch import watch as _watch  # noqa: F401, E402
from .inspect import inspect as _inspect  # noqa: F401, E402
from .listing import list_queries as _list_queries  # noqa: F401, E402
from .delete import delete as _delete  # noqa: F401, E402
