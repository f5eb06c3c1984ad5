"""In-memory quest source, used by tests and by the JSON loader."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from questlock.models.quests import ProfileRecord, Quest, RawStatus


class InMemoryQuestSource:
    """A ``QuestSource`` backed by plain dicts.

    Parameters
    ----------
    catalog:
        Quests in catalog order.
    profiles:
        Profile records; keyed by their ``profile_id``.
    statuses:
        ``profile_id -> quest_id -> status``.  Quests missing from a
        profile's map are ``LOCKED``.
    locale:
        ``quest_id -> localized name``.
    """

    def __init__(
        self,
        catalog: Iterable[Quest] = (),
        profiles: Iterable[ProfileRecord] = (),
        statuses: Mapping[str, Mapping[str, Any]] | None = None,
        locale: Mapping[str, str] | None = None,
    ) -> None:
        self._catalog = list(catalog)
        self._profiles = {profile.profile_id: profile for profile in profiles}
        self._statuses = {
            profile_id: dict(quest_statuses)
            for profile_id, quest_statuses in (statuses or {}).items()
        }
        self._locale = dict(locale or {})

    def get_catalog(self) -> list[Quest]:
        return list(self._catalog)

    def get_profiles(self) -> dict[str, ProfileRecord]:
        return dict(self._profiles)

    def get_raw_status(self, profile: ProfileRecord, quest_id: str) -> Any:
        return self._statuses.get(profile.profile_id, {}).get(quest_id, RawStatus.LOCKED)

    def resolve_display_name(
        self, quest_id: str, profile: ProfileRecord
    ) -> str | None:
        return self._locale.get(quest_id)

    def set_status(self, profile_id: str, quest_id: str, status: Any) -> None:
        """Update one status in place, as an upstream game server would."""
        self._statuses.setdefault(profile_id, {})[quest_id] = status
