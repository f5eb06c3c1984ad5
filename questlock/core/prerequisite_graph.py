"""Prerequisite graph and its TTL-refreshed cache.

The graph maps each quest to the quests it requires, as found in the
"available-for-start" conditions of type ``"Quest"``.  Unlike a build DAG,
the quest catalog is not guaranteed to be acyclic: the graph stores cycles
as-is and every traversal over it must tolerate them.

A ``PrerequisiteGraph`` is an immutable snapshot.  ``PrerequisiteGraphCache``
replaces it wholesale on rebuild, so readers see either the previous
complete graph or the new one, never a mix.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from questlock.models.quests import PrerequisiteEdge, Quest

logger = logging.getLogger(__name__)

QUEST_CONDITION_TYPE = "Quest"

# Resolves a quest id to a display name, or None when nothing usable exists.
NameResolver = Callable[[str], str | None]


def extract_target_ids(target: Any) -> list[str]:
    """Normalise a condition target into a list of quest ids.

    A single string becomes a one-item list, a list keeps its string items,
    anything else yields an empty list.
    """
    if not target:
        return []
    if isinstance(target, str):
        return [target]
    if isinstance(target, (list, tuple)):
        return [item for item in target if isinstance(item, str) and item]
    return []


def is_placeholder_name(quest_id: str, name: str | None) -> bool:
    """True if *name* carries no information beyond the quest id."""
    if not name or not name.strip():
        return True
    return name in (quest_id, f"{quest_id} Name", f"{quest_id} name", "name", "Name")


class PrerequisiteGraph:
    """Immutable quest -> direct prerequisites mapping.

    Quests without quest-type prerequisites have no entry at all; absence
    means "no quest-based lock".
    """

    def __init__(
        self, edges: Mapping[str, Iterable[PrerequisiteEdge]] | None = None
    ) -> None:
        self._prerequisites: dict[str, tuple[PrerequisiteEdge, ...]] = {
            quest_id: tuple(quest_edges)
            for quest_id, quest_edges in (edges or {}).items()
            if quest_edges
        }
        # Reverse edges: quest_id -> quests that list it as a prerequisite
        self._dependents: dict[str, list[str]] = {}
        for quest_id, quest_edges in self._prerequisites.items():
            for edge in quest_edges:
                self._dependents.setdefault(edge.required_quest_id, []).append(quest_id)

    def __len__(self) -> int:
        return len(self._prerequisites)

    def __contains__(self, quest_id: object) -> bool:
        return quest_id in self._prerequisites

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    @property
    def quest_ids(self) -> list[str]:
        """Quests that have at least one prerequisite, in catalog order."""
        return list(self._prerequisites)

    @property
    def edge_count(self) -> int:
        return sum(len(quest_edges) for quest_edges in self._prerequisites.values())

    def has_prerequisites(self, quest_id: str) -> bool:
        return quest_id in self._prerequisites

    def get_prerequisites(self, quest_id: str) -> tuple[PrerequisiteEdge, ...]:
        """Return the direct prerequisite edges of a quest (possibly empty)."""
        return self._prerequisites.get(quest_id, ())

    def get_dependents(self, quest_id: str) -> list[str]:
        """Return all transitive dependents of a quest (BFS, cycle-safe)."""
        result: list[str] = []
        queue = deque(self._dependents.get(quest_id, []))
        visited: set[str] = {quest_id}
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            result.append(node)
            queue.extend(self._dependents.get(node, []))
        return result


def build_quest_edges(
    quest: Quest, name_resolver: NameResolver | None = None
) -> list[PrerequisiteEdge]:
    """Build the prerequisite edges of a single quest.

    Without a *name_resolver* every edge is named after the raw quest id.
    """
    edges: list[PrerequisiteEdge] = []
    for condition in quest.available_for_start:
        if condition.condition_type != QUEST_CONDITION_TYPE:
            continue
        for target_id in extract_target_ids(condition.target):
            name = name_resolver(target_id) if name_resolver else None
            edges.append(
                PrerequisiteEdge(
                    quest_id=quest.id,
                    required_quest_id=target_id,
                    required_quest_name=name or target_id,
                )
            )
    return edges


class PrerequisiteGraphCache:
    """Holds the current ``PrerequisiteGraph`` and rebuilds it when stale.

    Parameters
    ----------
    ttl_seconds:
        Age after which the snapshot is considered stale.
    clock:
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._graph = PrerequisiteGraph()
        self._built = False
        self._built_at = 0.0
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def graph(self) -> PrerequisiteGraph:
        """The current snapshot (empty until the first rebuild)."""
        return self._graph

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def generation(self) -> int:
        """Number of successful rebuilds so far."""
        return self._generation

    def is_stale(self) -> bool:
        """True if never built, or built more than ``ttl_seconds`` ago."""
        if not self._built:
            return True
        return self._clock() - self._built_at > self.ttl_seconds

    def invalidate(self) -> None:
        """Force the next ``get()`` to rebuild."""
        self._built = False

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------

    def rebuild(
        self,
        catalog: Iterable[Quest],
        name_resolver: NameResolver | None = None,
    ) -> PrerequisiteGraph:
        """Rebuild the snapshot from *catalog* and swap it in.

        A quest that fails to produce edges is logged and contributes none.
        If the rebuild fails as a whole, the cache is left "not built" and
        the previous snapshot is returned so the next call retries.
        """
        try:
            quests = list(catalog)
            if not quests:
                logger.warning("No quests found in catalog; caching an empty graph")
                return self._swap(PrerequisiteGraph())

            if name_resolver is None:
                logger.warning(
                    "No sample profile available; building graph without quest name resolution"
                )

            edges: dict[str, list[PrerequisiteEdge]] = {}
            for quest in quests:
                try:
                    quest_edges = build_quest_edges(quest, name_resolver)
                except Exception as exc:  # noqa: BLE001
                    logger.debug(
                        "Skipping prerequisites of quest %s: %s",
                        getattr(quest, "id", quest),
                        exc,
                    )
                    continue
                if quest_edges:
                    edges[quest.id] = quest_edges

            graph = self._swap(PrerequisiteGraph(edges))
            logger.info(
                "Built prerequisite graph for %d quests (%d edges)",
                len(graph),
                graph.edge_count,
            )
            return graph
        except Exception as exc:  # noqa: BLE001
            logger.error("Error building prerequisite graph: %s", exc)
            self._built = False
            return self._graph

    def get(
        self,
        catalog: Iterable[Quest],
        name_resolver: NameResolver | None = None,
    ) -> PrerequisiteGraph:
        """Return a fresh snapshot, rebuilding under the lock if stale.

        Staleness is re-checked after acquiring the lock, so callers that
        queued behind a rebuild reuse its result instead of rebuilding again.
        """
        if not self.is_stale():
            return self._graph
        with self._lock:
            if not self.is_stale():
                return self._graph
            return self.rebuild(catalog, name_resolver)

    def _swap(self, graph: PrerequisiteGraph) -> PrerequisiteGraph:
        self._graph = graph
        self._built = True
        self._built_at = self._clock()
        self._generation += 1
        return graph

