"""Quest data sources.

Modules
-------
base
    ``QuestSource`` protocol and source errors.
memory
    ``InMemoryQuestSource`` — dict-backed source.
json_files
    ``load_json_source`` — builds a source from SPT-style JSON files.
"""

from questlock.sources.base import QuestlockError, QuestSource, SourceUnavailableError
from questlock.sources.json_files import load_json_source
from questlock.sources.memory import InMemoryQuestSource

__all__ = [
    "QuestSource",
    "QuestlockError",
    "SourceUnavailableError",
    "InMemoryQuestSource",
    "load_json_source",
]
