"""Quest catalog models — statuses, conditions, prerequisite edges."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RawStatus(IntEnum):
    """Quest status as reported by the upstream data source.

    Numeric values are the wire tags and must not be renumbered.
    """

    LOCKED = 0
    AVAILABLE = 1
    STARTED = 2
    AVAILABLE_FOR_FINISH = 3
    SUCCESS = 4
    FAIL = 5
    FAIL_RESTARTABLE = 6
    FAIL2 = 7
    EXPIRED = 8
    TIME_EXPIRED = 9

    @classmethod
    def coerce(cls, value: Any) -> RawStatus:
        """Convert an int or a status name into a ``RawStatus``.

        Accepts the enum names in any case, with or without underscores,
        and the upstream spellings used in profile files.

        Raises
        ------
        ValueError
            If *value* does not name a known status.
        """
        if isinstance(value, RawStatus):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Not a quest status: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            key = value.strip().replace("_", "").lower()
            if key.isdigit():
                return cls(int(key))
            if key in _STATUS_ALIASES:
                return _STATUS_ALIASES[key]
        raise ValueError(f"Not a quest status: {value!r}")


_STATUS_ALIASES: dict[str, RawStatus] = {
    member.name.replace("_", "").lower(): member for member in RawStatus
}
_STATUS_ALIASES.update(
    {
        "availableforstart": RawStatus.AVAILABLE,
        "markedasfailed": RawStatus.FAIL2,
        "availableafter": RawStatus.TIME_EXPIRED,
        "completed": RawStatus.SUCCESS,
    }
)


class QuestCondition(BaseModel):
    """One "available-for-start" condition of a quest.

    Only conditions of type ``"Quest"`` become prerequisite edges; level,
    reputation and other condition types are carried but never modelled.
    ``target`` is kept in whatever shape the catalog supplied.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    condition_type: str = Field(default="", alias="conditionType")
    target: Any = None


class Quest(BaseModel):
    """A quest from the shared catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    raw_name: str | None = None  # catalog QuestName, may be a placeholder
    available_for_start: list[QuestCondition] = []


class PrerequisiteEdge(BaseModel):
    """Directed edge: ``quest_id`` requires ``required_quest_id``."""

    model_config = ConfigDict(frozen=True)

    quest_id: str
    required_quest_id: str
    required_quest_name: str


class BlockerInfo(BaseModel):
    """Deepest unmet ancestor found while walking one prerequisite chain."""

    model_config = ConfigDict(frozen=True)

    first_blocker_id: str
    first_blocker_name: str
    hops_from_query: int


class ProfileRecord(BaseModel):
    """A profile known to the data source.

    ``display_name`` is the player nickname used as the report key;
    profiles without one are left out of reports.
    """

    model_config = ConfigDict(frozen=True)

    profile_id: str
    display_name: str | None = None
