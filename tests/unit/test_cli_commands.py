"""Unit tests for the CLI — Typer command registration and basic behavior.

Exercises help output, the report and graph commands against on-disk
quest data, and exit codes on missing inputs via typer.testing.CliRunner.
"""

from __future__ import annotations

import json

from typer.testing import CliRunner

from questlock.cli.app import app

runner = CliRunner()

DEBUT = "5936d90786f7742b1420ba5b"
SHOOTING_CANS = "5936da9e86f7742d65037edf"
LUXURIOUS_LIFE = "5967530a86f77462ba22226b"


def _report_args(spt_data, *extra: str) -> list[str]:
    return [
        "--log-level",
        "WARNING",
        "report",
        str(spt_data["quest_db"]),
        str(spt_data["profiles_dir"]),
        "--locale",
        str(spt_data["locale"]),
        *extra,
    ]


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        """Running 'questlock' with no args should show help (exit code 0 or 2)."""
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "report" in result.output
        assert "graph" in result.output

    def test_report_command_exists(self):
        result = runner.invoke(app, ["report", "--help"])
        assert result.exit_code == 0

    def test_graph_command_exists(self):
        result = runner.invoke(app, ["graph", "--help"])
        assert result.exit_code == 0


# ---------------------------------------------------------------------------
# Test: report
# ---------------------------------------------------------------------------


class TestReportCommand:
    def test_json_output(self, spt_data):
        result = runner.invoke(app, _report_args(spt_data, "--json"))
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert sorted(payload) == ["Luna", "Sol"]
        assert payload["Sol"][LUXURIOUS_LIFE]["lockedReason"] == "Debut (2 Quests Behind)"

    def test_json_respects_visibility(self, spt_data):
        result = runner.invoke(app, _report_args(spt_data, "--json", "--profiles", "*,-Sol"))
        assert result.exit_code == 0, result.output
        assert list(json.loads(result.stdout)) == ["Luna"]

    def test_table_output(self, spt_data):
        result = runner.invoke(app, _report_args(spt_data, "--quest", SHOOTING_CANS))
        assert result.exit_code == 0, result.output
        assert "Quest Status" in result.output
        assert "Luna" in result.output
        assert "Started" in result.output

    def test_missing_profiles_dir_exits_1(self, spt_data, tmp_path):
        result = runner.invoke(
            app, ["report", str(spt_data["quest_db"]), str(tmp_path / "missing")]
        )
        assert result.exit_code == 1
        assert "Cannot load quest data" in result.output


# ---------------------------------------------------------------------------
# Test: graph
# ---------------------------------------------------------------------------


class TestGraphCommand:
    def test_summary(self, spt_data):
        result = runner.invoke(app, ["--log-level", "WARNING", "graph", str(spt_data["quest_db"])])
        assert result.exit_code == 0, result.output
        assert "Quests:" in result.output
        assert "Edges:" in result.output

    def test_single_quest_lists_dependents(self, spt_data):
        result = runner.invoke(
            app, ["--log-level", "WARNING", "graph", str(spt_data["quest_db"]), "-q", DEBUT]
        )
        assert result.exit_code == 0, result.output
        assert "Unlocks" in result.output
        assert SHOOTING_CANS in result.output

    def test_unknown_quest_exits_1(self, spt_data):
        result = runner.invoke(app, ["graph", str(spt_data["quest_db"]), "-q", "nope"])
        assert result.exit_code == 1
        assert "Quest not found" in result.output

    def test_missing_database_exits_1(self, tmp_path):
        result = runner.invoke(app, ["graph", str(tmp_path / "quests.json")])
        assert result.exit_code == 1
        assert "Quest database not found" in result.output
