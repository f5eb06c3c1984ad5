"""``questlock report QUEST_DB PROFILES_DIR`` — resolve and show quest statuses."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from questlock.config import config
from questlock.monitor.renderer import StatusRenderer
from questlock.service import QuestStatusService
from questlock.sources.base import SourceUnavailableError
from questlock.sources.json_files import load_json_source

console = Console()


def report_cmd(
    quest_db: Path = typer.Argument(
        ...,
        help="Path to the quest database JSON (quests.json).",
    ),
    profiles_dir: Path = typer.Argument(
        ...,
        help="Directory of profile JSON files.",
    ),
    locale: Path = typer.Option(
        None,
        "--locale",
        "-l",
        help="Locale JSON with '<id> name' keys for quest names.",
    ),
    visible: str = typer.Option(
        None,
        "--profiles",
        "-p",
        help="Visible profiles: '*', 'Name1,Name2' or '*,-Name'.",
    ),
    quest_ids: list[str] = typer.Option(
        None,
        "--quest",
        "-q",
        help="Only show these quest ids (repeatable).",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the wire JSON instead of a table.",
    ),
) -> None:
    """Resolve effective quest statuses for every player profile."""
    try:
        source = load_json_source(quest_db, profiles_dir, locale)
    except SourceUnavailableError as exc:
        console.print(f"[bold red]Cannot load quest data:[/bold red] {exc}")
        raise typer.Exit(code=1)

    service = QuestStatusService(source, config)
    report = service.get_statuses(visible)

    if as_json:
        typer.echo(report.to_json(indent=2))
        return

    StatusRenderer(console=console).print_report(report, quest_ids or None)
