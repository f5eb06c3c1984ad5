"""Main Typer application — imports and registers all CLI commands.

Entry point: ``questlock`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from questlock.cli.commands.graph import graph_cmd
from questlock.cli.commands.report import report_cmd
from questlock.config import config
from questlock.logging import setup_logging

app = typer.Typer(
    name="questlock",
    help="Questlock: quest prerequisite status and blocker resolution.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Log level (defaults to QUESTLOCK_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging before any command runs."""
    setup_logging(log_level or config.log_level)


# Register subcommands
app.command(name="report", help="Resolve quest statuses for all player profiles.")(report_cmd)
app.command(name="graph", help="Show the quest prerequisite graph.")(graph_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
