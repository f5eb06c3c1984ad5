"""Questlock: quest prerequisite status and blocker resolution.

For every player profile, computes the effective status of every quest in
a shared catalog and explains locked quests by naming the furthest-back
unmet prerequisite:

  - Prerequisite graph built from "available-for-start" quest conditions,
    cached with a TTL and rebuilt atomically under a lock
  - Cycle- and depth-guarded blocker search, memoized per query
  - Locked -> Available correction for stale upstream statuses
  - Per-item fault isolation: a bad quest or profile never fails a report
  - JSON file source for SPT-style data, Rich renderer, Typer CLI
"""

__version__ = "0.1.0"
__description__ = "Quest prerequisite status and blocker resolution engine"

from questlock.core.prerequisite_graph import PrerequisiteGraph, PrerequisiteGraphCache
from questlock.core.status_resolver import StatusResolver
from questlock.service import QuestStatusService

__all__ = [
    "PrerequisiteGraph",
    "PrerequisiteGraphCache",
    "StatusResolver",
    "QuestStatusService",
    "__version__",
]
