"""StatusResolver — effective quest statuses and locked reasons per profile.

For every (profile, quest) pair the resolver reports the upstream status,
with one correction: a ``LOCKED`` quest whose quest prerequisites are all
``SUCCESS`` is promoted to ``AVAILABLE``.  Upstream statuses are eventually
consistent and can still read ``LOCKED`` after the last prerequisite
completed.  The promotion cannot tell that case apart from a quest that is
also held back by a level or reputation condition, so it can be switched
off with ``promote_satisfied_locked``.

Locked quests with unmet prerequisites get a reason naming the deepest
unmet ancestor that has no prerequisites of its own, found by walking the
prerequisite chains::

    "Debut"                      direct prerequisite is the root cause
    "Debut (3 Quests Behind)"    root cause is three prerequisite hops back

All memoization lives in a ``ResolutionQuery`` created per ``resolve_all``
call, so concurrent queries never share mutable state beyond the read-only
graph snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from questlock.config import EngineConfig
from questlock.core.prerequisite_graph import (
    PrerequisiteGraph,
    PrerequisiteGraphCache,
    is_placeholder_name,
)
from questlock.core.profile_filter import is_player_profile
from questlock.models.quests import (
    BlockerInfo,
    PrerequisiteEdge,
    ProfileRecord,
    Quest,
    RawStatus,
)
from questlock.models.reports import QuestStatusInfo, StatusReport
from questlock.sources.base import QuestSource

logger = logging.getLogger(__name__)


class ResolutionQuery:
    """Request-scoped state for one aggregate query.

    Holds the graph snapshot the query runs against and the memo tables,
    keyed by ``(profile_id, quest_id)``; ``blockers`` also carries the
    remaining depth budget.  Discarded when the query ends.
    """

    def __init__(
        self,
        graph: PrerequisiteGraph,
        catalog_index: Mapping[str, Quest] | None = None,
    ) -> None:
        self.graph = graph
        self.catalog_index: Mapping[str, Quest] = catalog_index or {}
        self.locked_reasons: dict[tuple[str, str], str | None] = {}
        self.statuses: dict[tuple[str, str], int] = {}
        self.names: dict[tuple[str, str], str | None] = {}
        self.blockers: dict[tuple[str, str, int], tuple[str, int] | None] = {}


class _SearchFrame:
    """One open quest on the blocker-search stack."""

    __slots__ = ("node", "depth", "visited", "children", "next_index", "best", "clean")

    def __init__(
        self, node: str, depth: int, visited: frozenset[str], children: list[str]
    ) -> None:
        self.node = node
        self.depth = depth
        self.visited = visited
        self.children = children
        self.next_index = 0
        self.best: tuple[str, int] | None = None
        self.clean = True


class StatusResolver:
    """Resolves effective statuses for profiles against the quest catalog.

    Parameters
    ----------
    source:
        Supplies raw statuses and localized names.
    config:
        Engine tunables.  Defaults are used if not provided.
    graph_cache:
        Shared prerequisite graph cache.  One is created from ``config`` if
        not provided.
    """

    def __init__(
        self,
        source: QuestSource,
        config: EngineConfig | None = None,
        graph_cache: PrerequisiteGraphCache | None = None,
    ) -> None:
        self.source = source
        self.config = config or EngineConfig()
        self.graph_cache = graph_cache or PrerequisiteGraphCache(
            self.config.cache_ttl_seconds
        )

    # ------------------------------------------------------------------
    # Aggregate query
    # ------------------------------------------------------------------

    def resolve_all(
        self,
        profiles: Mapping[str, ProfileRecord],
        catalog: Iterable[Quest],
    ) -> StatusReport:
        """Resolve every quest for every player profile.

        System profiles (excluded prefixes) and profiles without a display
        name are skipped.  A failure on a single quest degrades that entry
        to ``LOCKED``; a failure of the whole query returns an empty report.
        """
        try:
            quests = list(catalog)
            players = [
                profile
                for profile_id, profile in profiles.items()
                if is_player_profile(profile_id, self.config.excluded_profile_prefixes)
            ]
            catalog_index = {quest.id: quest for quest in quests}
            graph = self.refresh_graph(
                quests, players[0] if players else None, catalog_index
            )

            if not players:
                logger.info("No profiles available")
                return StatusReport()
            if not quests:
                logger.info("No quests available")
                return StatusReport()

            query = ResolutionQuery(graph, catalog_index)
            result: dict[str, dict[str, QuestStatusInfo]] = {}
            for profile in players:
                if not profile.display_name:
                    logger.debug("Profile %s has no display name", profile.profile_id)
                    continue
                result[profile.display_name] = self.resolve_profile(profile, quests, query)

            logger.debug("Processed %d profiles", len(result))
            return StatusReport(profiles=result)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error resolving quest statuses: %s", exc)
            return StatusReport()

    def refresh_graph(
        self,
        catalog: list[Quest],
        sample_profile: ProfileRecord | None = None,
        catalog_index: Mapping[str, Quest] | None = None,
    ) -> PrerequisiteGraph:
        """Return the graph snapshot, rebuilding it first if stale.

        *sample_profile* is used to resolve prerequisite display names.
        """
        name_resolver = None
        if sample_profile is not None:
            index = catalog_index if catalog_index is not None else {q.id: q for q in catalog}

            def name_resolver(quest_id: str) -> str | None:
                return self.resolve_quest_name(quest_id, sample_profile, index)

        return self.graph_cache.get(catalog, name_resolver)

    def resolve_profile(
        self,
        profile: ProfileRecord,
        catalog: Iterable[Quest],
        query: ResolutionQuery,
    ) -> dict[str, QuestStatusInfo]:
        """Resolve every catalog quest for one profile.

        Every quest gets an entry, even when its evaluation fails.
        """
        statuses: dict[str, QuestStatusInfo] = {}
        for quest in catalog:
            try:
                statuses[quest.id] = self.resolve_quest(profile, quest.id, query)
            except Exception as exc:  # noqa: BLE001
                logger.debug("Failed to get status for quest %s: %s", quest.id, exc)
                statuses[quest.id] = QuestStatusInfo(
                    status=int(RawStatus.LOCKED), quest_name=quest.id
                )
        return statuses

    def resolve_quest(
        self, profile: ProfileRecord, quest_id: str, query: ResolutionQuery
    ) -> QuestStatusInfo:
        """Resolve one quest for one profile, applying the correction policy."""
        status = self._raw_status(profile, quest_id, query)
        quest_name = self._quest_name(quest_id, profile, query) or quest_id

        if status != RawStatus.LOCKED:
            return QuestStatusInfo(status=status, quest_name=quest_name)

        locked_reason = self.find_locked_reason(quest_id, profile, query)
        if locked_reason is None:
            if not query.graph.has_prerequisites(quest_id):
                logger.debug(
                    "Quest %s is locked by level/reputation/other conditions",
                    quest_id,
                )
            elif self.config.promote_satisfied_locked:
                logger.debug(
                    "Quest %s overridden to Available (all prerequisites completed)",
                    quest_id,
                )
                status = int(RawStatus.AVAILABLE)

        return QuestStatusInfo(
            status=status, locked_reason=locked_reason, quest_name=quest_name
        )

    # ------------------------------------------------------------------
    # Blocker-chain search
    # ------------------------------------------------------------------

    def find_locked_reason(
        self,
        quest_id: str,
        profile: ProfileRecord,
        query: ResolutionQuery | None = None,
    ) -> str | None:
        """Explain why a quest is locked by its quest prerequisites.

        Returns ``None`` when the quest has no quest prerequisites or all of
        them are complete.  Memoized per ``(profile, quest)`` in *query*;
        without a query the current graph snapshot is used unmemoized.
        """
        query = query or ResolutionQuery(self.graph_cache.graph)
        key = (profile.profile_id, quest_id)
        if key in query.locked_reasons:
            return query.locked_reasons[key]

        unmet = self._unmet_prerequisites(quest_id, profile, query)
        reason: str | None = None
        if unmet:
            best: BlockerInfo | None = None
            for edge in unmet:
                candidate = self.find_first_blocker(
                    edge.required_quest_id,
                    profile,
                    query,
                    ancestors=frozenset({quest_id}),
                )
                if candidate and (best is None or candidate.hops_from_query > best.hops_from_query):
                    best = candidate

            if best is not None:
                reason = format_blocker(best)
            else:
                # Every branch dead-ended (completed prerequisites, cycle or depth guard)
                reason = ", ".join(edge.required_quest_name for edge in unmet)
            logger.debug("Locked reason for %s: %s", quest_id, reason)

        query.locked_reasons[key] = reason
        return reason

    def find_first_blocker(
        self,
        quest_id: str,
        profile: ProfileRecord,
        query: ResolutionQuery,
        *,
        hops: int = 1,
        ancestors: frozenset[str] = frozenset(),
    ) -> BlockerInfo | None:
        """Walk the unmet chain below *quest_id* to its deepest root cause.

        A root cause is an unmet quest with no quest prerequisites at all.
        A quest whose prerequisites are all complete is a dead end, as is a
        quest already on the current branch (a cycle).  Among all root
        causes the one with the most hops wins; on a tie the first found in
        depth-first order wins.

        The direct prerequisite sits at traversal depth 0 (``hops=1``);
        branches deeper than ``max_traversal_depth`` are dropped.

        Subtree results are memoized in *query* per remaining depth budget,
        so shared ancestors (diamonds) are walked once.  Subtrees that were
        cut short by a cycle depend on the branch and are never memoized.
        """
        result, _ = self._deepest_root(quest_id, profile, query, hops, ancestors)
        if result is None:
            return None
        root_id, distance = result
        return BlockerInfo(
            first_blocker_id=root_id,
            first_blocker_name=self._quest_name(root_id, profile, query) or root_id,
            hops_from_query=hops + distance,
        )

    def _deepest_root(
        self,
        quest_id: str,
        profile: ProfileRecord,
        query: ResolutionQuery,
        hops: int,
        ancestors: frozenset[str],
    ) -> tuple[tuple[str, int] | None, bool]:
        """Iterative post-order search; returns ``((root_id, distance), clean)``.

        *distance* is counted from *quest_id*.  *clean* is False when a
        cycle was cut somewhere below *quest_id*.
        """
        max_depth = self.config.max_traversal_depth
        stack: list[_SearchFrame] = []
        returned: tuple[tuple[str, int] | None, bool] | None = None

        frame_or_result = self._enter(quest_id, hops - 1, ancestors, profile, query, max_depth)
        if isinstance(frame_or_result, _SearchFrame):
            stack.append(frame_or_result)
        else:
            returned = frame_or_result

        while stack:
            frame = stack[-1]
            if returned is not None:
                child_result, child_clean = returned
                returned = None
                frame.clean = frame.clean and child_clean
                if child_result is not None and (
                    frame.best is None or child_result[1] + 1 > frame.best[1]
                ):
                    frame.best = (child_result[0], child_result[1] + 1)

            if frame.next_index < len(frame.children):
                child = frame.children[frame.next_index]
                frame.next_index += 1
                entered = self._enter(
                    child,
                    frame.depth + 1,
                    frame.visited,
                    profile,
                    query,
                    max_depth,
                )
                if isinstance(entered, _SearchFrame):
                    stack.append(entered)
                else:
                    returned = entered
                continue

            stack.pop()
            if frame.clean:
                query.blockers[(profile.profile_id, frame.node, max_depth - frame.depth)] = frame.best
            returned = (frame.best, frame.clean)

        return returned

    def _enter(
        self,
        node: str,
        depth: int,
        visited: frozenset[str],
        profile: ProfileRecord,
        query: ResolutionQuery,
        max_depth: int,
    ) -> _SearchFrame | tuple[tuple[str, int] | None, bool]:
        """Open a frame for *node*, or settle it at once."""
        if depth > max_depth:
            logger.warning("Max quest depth (%d) exceeded for quest %s", max_depth, node)
            return None, True
        if node in visited:
            logger.debug("Circular dependency detected for quest %s", node)
            return None, False

        key = (profile.profile_id, node, max_depth - depth)
        if key in query.blockers:
            return query.blockers[key], True

        if not query.graph.has_prerequisites(node):
            query.blockers[key] = (node, 0)
            return (node, 0), True

        unmet = self._unmet_prerequisites(node, profile, query)
        if not unmet:
            query.blockers[key] = None
            return None, True

        return _SearchFrame(
            node,
            depth,
            visited | {node},
            [edge.required_quest_id for edge in unmet],
        )

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def resolve_quest_name(
        self,
        quest_id: str,
        profile: ProfileRecord,
        catalog_index: Mapping[str, Quest] | None = None,
    ) -> str | None:
        """Localized name, then the catalog name, skipping placeholders.

        Returns ``None`` when neither is usable; callers fall back to the id.
        """
        try:
            localized = self.source.resolve_display_name(quest_id, profile)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error getting quest name for %s: %s", quest_id, exc)
            localized = None
        if not is_placeholder_name(quest_id, localized):
            return localized

        quest = (catalog_index or {}).get(quest_id)
        if quest is not None and not is_placeholder_name(quest_id, quest.raw_name):
            return quest.raw_name
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raw_status(
        self, profile: ProfileRecord, quest_id: str, query: ResolutionQuery
    ) -> int:
        key = (profile.profile_id, quest_id)
        if key in query.statuses:
            return query.statuses[key]

        value: Any = self.source.get_raw_status(profile, quest_id)
        try:
            status = int(RawStatus.coerce(value))
        except ValueError:
            if not isinstance(value, int) or isinstance(value, bool):
                raise
            logger.debug("Invalid quest status %r for quest %s", value, quest_id)
            status = value

        query.statuses[key] = status
        return status

    def _quest_name(
        self, quest_id: str, profile: ProfileRecord, query: ResolutionQuery
    ) -> str | None:
        key = (profile.profile_id, quest_id)
        if key not in query.names:
            query.names[key] = self.resolve_quest_name(
                quest_id, profile, query.catalog_index
            )
        return query.names[key]

    def _unmet_prerequisites(
        self, quest_id: str, profile: ProfileRecord, query: ResolutionQuery
    ) -> list[PrerequisiteEdge]:
        return [
            edge
            for edge in query.graph.get_prerequisites(quest_id)
            if self._raw_status(profile, edge.required_quest_id, query) != RawStatus.SUCCESS
        ]


def format_blocker(blocker: BlockerInfo) -> str:
    """Render a blocker as ``"<name>"`` or ``"<name> (<hops> Quests Behind)"``."""
    if blocker.hops_from_query > 1:
        return f"{blocker.first_blocker_name} ({blocker.hops_from_query} Quests Behind)"
    return blocker.first_blocker_name
