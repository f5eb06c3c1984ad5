"""``questlock graph QUEST_DB`` — show the quest prerequisite graph."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from questlock.core.prerequisite_graph import PrerequisiteGraphCache
from questlock.monitor.renderer import StatusRenderer
from questlock.sources.base import SourceUnavailableError
from questlock.sources.json_files import load_catalog

console = Console()


def graph_cmd(
    quest_db: Path = typer.Argument(
        ...,
        help="Path to the quest database JSON (quests.json).",
    ),
    quest_id: str = typer.Option(
        None,
        "--quest",
        "-q",
        help="Show one quest's prerequisites and the quests it unlocks.",
    ),
) -> None:
    """Show quest prerequisite edges.

    Names are not resolved here; edges show raw quest ids.
    """
    if not quest_db.is_file():
        console.print(f"[bold red]Quest database not found:[/bold red] {quest_db}")
        raise typer.Exit(code=1)
    try:
        catalog = load_catalog(quest_db)
    except SourceUnavailableError as exc:
        console.print(f"[bold red]Cannot load quest data:[/bold red] {exc}")
        raise typer.Exit(code=1)

    graph = PrerequisiteGraphCache().rebuild(catalog)
    if quest_id is not None and quest_id not in {quest.id for quest in catalog}:
        console.print(f"[bold red]Quest not found:[/bold red] {quest_id}")
        raise typer.Exit(code=1)

    StatusRenderer(console=console).print_graph(graph, quest_id)
