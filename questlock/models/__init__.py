"""Questlock data models — all Pydantic v2, all frozen (immutable)."""

from questlock.models.quests import (
    BlockerInfo,
    PrerequisiteEdge,
    ProfileRecord,
    Quest,
    QuestCondition,
    RawStatus,
)
from questlock.models.reports import QuestStatusInfo, StatusReport

__all__ = [
    # quests
    "RawStatus",
    "QuestCondition",
    "Quest",
    "PrerequisiteEdge",
    "BlockerInfo",
    "ProfileRecord",
    # reports
    "QuestStatusInfo",
    "StatusReport",
]
