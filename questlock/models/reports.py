"""Report models — the aggregate output of a status query.

The wire shape produced by ``StatusReport.to_wire()`` is::

    {
        "<player name>": {
            "<quest id>": {"status": 0, "lockedReason": "...", "questName": "..."},
        },
    }

``lockedReason`` is omitted entirely when there is no reason.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QuestStatusInfo(BaseModel):
    """Effective status of one quest for one profile."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: int
    locked_reason: str | None = Field(default=None, alias="lockedReason")
    quest_name: str = Field(alias="questName")


class StatusReport(BaseModel):
    """Statuses keyed by player display name, then quest id.

    Computed fresh on every query and never persisted.
    """

    model_config = ConfigDict(frozen=True)

    profiles: dict[str, dict[str, QuestStatusInfo]] = {}
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def player_names(self) -> list[str]:
        return list(self.profiles)

    def get(self, player_name: str, quest_id: str) -> QuestStatusInfo | None:
        """Return the entry for one player and quest, or ``None``."""
        return self.profiles.get(player_name, {}).get(quest_id)

    def to_wire(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Return the report as the plain-dict wire contract."""
        return {
            player: {
                quest_id: info.model_dump(by_alias=True, exclude_none=True)
                for quest_id, info in quests.items()
            }
            for player, quests in self.profiles.items()
        }

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the wire contract to JSON."""
        return json.dumps(self.to_wire(), indent=indent, ensure_ascii=False)
