"""The ``QuestSource`` protocol — where catalogs, profiles and statuses come from.

The engine only ever reads from a source; it never mutates one.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from questlock.models.quests import ProfileRecord, Quest


class QuestlockError(RuntimeError):
    """Base class for questlock errors."""


class SourceUnavailableError(QuestlockError):
    """Raised when a quest source cannot supply the requested data."""


@runtime_checkable
class QuestSource(Protocol):
    """Protocol for quest/profile data backends.

    Any object with these four methods satisfies the protocol.  Methods may
    raise on failure; the engine isolates those failures per item.
    """

    def get_catalog(self) -> list[Quest]:
        """Return every quest in the shared catalog, in catalog order."""
        ...

    def get_profiles(self) -> dict[str, ProfileRecord]:
        """Return all profiles keyed by profile id, system profiles included."""
        ...

    def get_raw_status(self, profile: ProfileRecord, quest_id: str) -> Any:
        """Return the upstream status of a quest for a profile.

        Normally a ``RawStatus`` or its integer value.
        """
        ...

    def resolve_display_name(
        self, quest_id: str, profile: ProfileRecord
    ) -> str | None:
        """Return the localized name of a quest, or ``None`` if unknown."""
        ...
