"""Rich terminal renderer for status reports and prerequisite graphs.

Turns ``StatusReport`` into a quest-by-player table and
``PrerequisiteGraph`` into an edge table.

Color scheme
------------
- grey        : Locked
- gold        : Available
- orange      : Started
- green       : Ready! (available for finish)
- lime green  : Completed
- red         : Failed
- dark orange : Failed (Retry)
- dark grey   : Expired
- sky blue    : Timed
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from questlock.core.prerequisite_graph import PrerequisiteGraph
from questlock.models.quests import RawStatus
from questlock.models.reports import QuestStatusInfo, StatusReport

# ---------------------------------------------------------------------------
# Status -> label / Rich style mapping
# ---------------------------------------------------------------------------

_STATUS_LABELS: dict[RawStatus, str] = {
    RawStatus.LOCKED: "Locked",
    RawStatus.AVAILABLE: "Available",
    RawStatus.STARTED: "Started",
    RawStatus.AVAILABLE_FOR_FINISH: "Ready!",
    RawStatus.SUCCESS: "Completed",
    RawStatus.FAIL: "Failed",
    RawStatus.FAIL_RESTARTABLE: "Failed (Retry)",
    RawStatus.FAIL2: "Failed",
    RawStatus.EXPIRED: "Expired",
    RawStatus.TIME_EXPIRED: "Timed",
}

_STATUS_STYLES: dict[RawStatus, str] = {
    RawStatus.LOCKED: "#808080",
    RawStatus.AVAILABLE: "#FFD700",
    RawStatus.STARTED: "#FFA500",
    RawStatus.AVAILABLE_FOR_FINISH: "#00FF00",
    RawStatus.SUCCESS: "#32CD32",
    RawStatus.FAIL: "#FF4444",
    RawStatus.FAIL_RESTARTABLE: "#FF6600",
    RawStatus.FAIL2: "#FF4444",
    RawStatus.EXPIRED: "#666666",
    RawStatus.TIME_EXPIRED: "#87CEEB",
}

# A reason that is still a raw 24-hex quest id means the name never resolved
_RAW_QUEST_ID = re.compile(r"^[a-f0-9]{24}$")


def status_label(status: int) -> str:
    """Human-readable label for a status value, ``"Unknown"`` if unmapped."""
    try:
        return _STATUS_LABELS[RawStatus(status)]
    except ValueError:
        return "Unknown"


def status_style(status: int) -> str:
    try:
        return _STATUS_STYLES[RawStatus(status)]
    except ValueError:
        return "#FFFFFF"


class StatusRenderer:
    """Renders reports and graphs as Rich terminal output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def render_status(self, info: QuestStatusInfo | None) -> Text:
        """Render one cell: colored status label plus the locked reason."""
        if info is None:
            return Text("-", style="dim")

        text = Text(status_label(info.status), style=status_style(info.status))
        if info.status == RawStatus.LOCKED:
            reason = info.locked_reason
            if reason and _RAW_QUEST_ID.match(reason):
                text.append(f" (Quest not found: {reason[:12]})", style="#FF0000")
            elif reason:
                text.append(f" ({reason})", style="#666666")
            else:
                text.append(" (Other conditions)", style="#888888")
        return text

    def render_report(
        self,
        report: StatusReport,
        quest_ids: Iterable[str] | None = None,
    ) -> Panel:
        """Render a report as a Panel with one row per quest, one column per player.

        *quest_ids* restricts and orders the rows; by default every quest of
        the first player is shown in report order.
        """
        players = report.player_names
        if quest_ids is None:
            quest_ids = list(report.profiles[players[0]]) if players else []
        else:
            quest_ids = list(quest_ids)

        table = Table(
            show_header=True,
            header_style="bold cyan",
            expand=True,
            show_lines=False,
            pad_edge=True,
        )
        table.add_column("Quest", min_width=25)
        for player in players:
            table.add_column(player, min_width=14)

        for quest_id in quest_ids:
            name = quest_id
            cells: list[Text] = []
            for player in players:
                info = report.get(player, quest_id)
                if info is not None:
                    name = info.quest_name
                cells.append(self.render_status(info))
            table.add_row(Text(name), *cells)

        if not players:
            body: Table | Text = Text("No visible profiles", style="#888888")
        else:
            body = table

        return Panel(
            body,
            title="[bold]Quest Status[/bold]",
            subtitle=f"Generated: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style="#9A8866",
            padding=(1, 2),
        )

    def print_report(
        self, report: StatusReport, quest_ids: Iterable[str] | None = None
    ) -> None:
        """Print a report to the console."""
        self.console.print(self.render_report(report, quest_ids))

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------

    def render_graph(
        self, graph: PrerequisiteGraph, quest_id: str | None = None
    ) -> Table:
        """Render prerequisite edges, for every quest or a single one."""
        table = Table(
            title="Quest Prerequisites",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Quest", style="cyan")
        table.add_column("Requires")
        table.add_column("Required Quest ID", style="dim")

        quest_ids = [quest_id] if quest_id is not None else graph.quest_ids
        for qid in quest_ids:
            for edge in graph.get_prerequisites(qid):
                table.add_row(edge.quest_id, edge.required_quest_name, edge.required_quest_id)
        return table

    def print_graph(self, graph: PrerequisiteGraph, quest_id: str | None = None) -> None:
        """Print the prerequisite edges and, for one quest, its dependents."""
        self.console.print(self.render_graph(graph, quest_id))
        if quest_id is None:
            self.console.print(
                f"[bold]Quests:[/bold] {len(graph)}  |  [bold]Edges:[/bold] {graph.edge_count}"
            )
            return

        dependents = graph.get_dependents(quest_id)
        if dependents:
            self.console.print(f"[bold]Unlocks (transitively):[/bold] {', '.join(dependents)}")
        else:
            self.console.print("[dim]No quests depend on this quest.[/dim]")
