"""QuestStatusService — the request/response surface over a quest source.

Wires a ``QuestSource`` to a ``StatusResolver`` and its graph cache.  One
service instance is created per process and shared by all requests; the
graph cache is the only state kept between requests.
"""

from __future__ import annotations

import logging

from questlock.config import EngineConfig
from questlock.core.prerequisite_graph import PrerequisiteGraph, PrerequisiteGraphCache
from questlock.core.profile_filter import ProfileVisibility, is_player_profile
from questlock.core.status_resolver import StatusResolver
from questlock.models.reports import StatusReport
from questlock.sources.base import QuestSource

logger = logging.getLogger(__name__)


class QuestStatusService:
    """Answers "what is every player's status on every quest?".

    Parameters
    ----------
    source:
        The quest/profile data source.
    config:
        Engine configuration.  Defaults are used if not provided.
    """

    def __init__(
        self,
        source: QuestSource,
        config: EngineConfig | None = None,
    ) -> None:
        self.source = source
        self.config = config or EngineConfig()
        self.graph_cache = PrerequisiteGraphCache(self.config.cache_ttl_seconds)
        self.resolver = StatusResolver(source, self.config, self.graph_cache)

    def get_statuses(
        self, visibility: ProfileVisibility | str | None = None
    ) -> StatusReport:
        """Run a full status query.

        Failure to enumerate profiles or quests yields an empty report.
        *visibility* trims the finished report to the players a viewer
        asked for; it defaults to ``config.visible_profiles``.
        """
        try:
            profiles = self.source.get_profiles()
            catalog = self.source.get_catalog()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error reading profiles or quests: %s", exc)
            return StatusReport()

        report = self.resolver.resolve_all(profiles, catalog)

        if visibility is None:
            visibility = self.config.visible_profiles
        if isinstance(visibility, str):
            visibility = ProfileVisibility.parse(visibility)
        if visibility.shows_all:
            return report
        return StatusReport(
            profiles={
                name: quests
                for name, quests in report.profiles.items()
                if visibility.is_visible(name)
            },
            generated_at=report.generated_at,
        )

    def get_statuses_json(
        self, visibility: ProfileVisibility | str | None = None
    ) -> str:
        """Run a status query and return the wire JSON (``"{}"`` on failure)."""
        try:
            return self.get_statuses(visibility).to_json()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error serialising quest statuses: %s", exc)
            return "{}"

    def graph(self) -> PrerequisiteGraph:
        """Return the prerequisite graph, rebuilding it first if stale."""
        try:
            profiles = self.source.get_profiles()
            catalog = self.source.get_catalog()
        except Exception as exc:  # noqa: BLE001
            logger.error("Error reading profiles or quests: %s", exc)
            return self.graph_cache.graph

        sample = next(
            (
                profile
                for profile_id, profile in profiles.items()
                if is_player_profile(profile_id, self.config.excluded_profile_prefixes)
            ),
            None,
        )
        return self.resolver.refresh_graph(catalog, sample)
