"""Questlock CLI — Typer-based command-line interface.

Provides the ``questlock`` command with subcommands for resolving quest
statuses from JSON data and inspecting the prerequisite graph.

All output uses Rich for formatted terminal display.
"""
