"""Load a quest source from SPT-style JSON files.

Expected layout
---------------
quest database
    ``{"<id>": {"_id": ..., "QuestName": ..., "conditions":
    {"AvailableForStart": [{"conditionType": "Quest", "target": ...}]}}}``
    or a JSON list of the same quest objects.
profiles directory
    One ``*.json`` file per profile with ``info.id``,
    ``characters.pmc.Info.Nickname`` and ``characters.pmc.Quests``
    (``[{"qid": ..., "status": 4}]``; status may also be a name).
locale file (optional)
    ``{"<id> name": "<localized name>", ...}``.

Malformed quests, conditions and profile files are skipped with a warning.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from questlock.models.quests import ProfileRecord, Quest, QuestCondition, RawStatus
from questlock.sources.base import SourceUnavailableError
from questlock.sources.memory import InMemoryQuestSource

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SourceUnavailableError(f"Cannot read {path}: {exc}") from exc


def _object_field(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise SourceUnavailableError(f"{path}: {key!r} is {type(value).__name__}, not an object")
    return value


def parse_quest(raw: Any, fallback_id: str | None = None) -> Quest:
    """Build a ``Quest`` from one quest-database entry.

    Conditions that are not objects, or fail validation, are dropped.

    Raises
    ------
    ValueError
        If the entry is not an object or has no usable id.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"quest entry is {type(raw).__name__}, not an object")
    quest_id = raw.get("_id") or raw.get("id") or fallback_id
    if not isinstance(quest_id, str) or not quest_id:
        raise ValueError("quest entry has no id")

    conditions: list[QuestCondition] = []
    conditions_block = raw.get("conditions")
    if not isinstance(conditions_block, dict):
        if conditions_block:
            logger.debug("Ignoring non-object conditions on quest %s", quest_id)
        conditions_block = {}
    raw_conditions = conditions_block.get("AvailableForStart") or []
    if isinstance(raw_conditions, list):
        for raw_condition in raw_conditions:
            if not isinstance(raw_condition, dict):
                logger.debug("Dropping non-object condition on quest %s", quest_id)
                continue
            try:
                conditions.append(QuestCondition.model_validate(raw_condition))
            except ValidationError as exc:
                logger.debug("Dropping malformed condition on quest %s: %s", quest_id, exc)

    raw_name = raw.get("QuestName")
    return Quest(
        id=quest_id,
        raw_name=raw_name if isinstance(raw_name, str) else None,
        available_for_start=conditions,
    )


def load_catalog(path: Path) -> list[Quest]:
    """Load every well-formed quest from a quest database file."""
    data = _read_json(path)
    if isinstance(data, dict) and isinstance(data.get("data"), (dict, list)):
        data = data["data"]  # server responses wrap the payload
    if isinstance(data, dict):
        entries = list(data.items())
    elif isinstance(data, list):
        entries = [(None, entry) for entry in data]
    else:
        raise SourceUnavailableError(f"{path} does not contain a quest collection")

    quests: list[Quest] = []
    for key, raw in entries:
        try:
            quests.append(parse_quest(raw, fallback_id=key))
        except (ValueError, ValidationError) as exc:
            logger.warning("Skipping quest %s in %s: %s", key or "?", path.name, exc)
    return quests


def load_profile(path: Path) -> tuple[ProfileRecord, dict[str, RawStatus]]:
    """Load one profile file into a record and its quest statuses.

    Raises
    ------
    SourceUnavailableError
        If the file cannot be read or parsed, or a section has the wrong shape.
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise SourceUnavailableError(f"{path} is not a profile object")

    info = _object_field(data, "info", path)
    profile_id = info.get("id") or path.stem
    pmc = _object_field(_object_field(data, "characters", path), "pmc", path)
    nickname = _object_field(pmc, "Info", path).get("Nickname")

    statuses: dict[str, RawStatus] = {}
    quest_entries = pmc.get("Quests") or []
    if not isinstance(quest_entries, list):
        raise SourceUnavailableError(f"{path}: 'Quests' is {type(quest_entries).__name__}, not a list")
    for entry in quest_entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("qid"), str):
            continue
        try:
            statuses[entry["qid"]] = RawStatus.coerce(entry.get("status"))
        except ValueError:
            logger.debug(
                "Unknown status %r for quest %s in %s",
                entry.get("status"),
                entry["qid"],
                path.name,
            )

    record = ProfileRecord(
        profile_id=str(profile_id),
        display_name=nickname if isinstance(nickname, str) and nickname else None,
    )
    return record, statuses


def load_locale(path: Path) -> dict[str, str]:
    """Extract ``quest_id -> name`` from a locale file with ``"<id> name"`` keys."""
    data = _read_json(path)
    if not isinstance(data, dict):
        raise SourceUnavailableError(f"{path} is not a locale object")
    locale: dict[str, str] = {}
    for key, value in data.items():
        if isinstance(key, str) and key.endswith(" name") and isinstance(value, str):
            locale[key[: -len(" name")]] = value
    return locale


def load_json_source(
    quest_db: Path,
    profiles_dir: Path,
    locale_path: Path | None = None,
) -> InMemoryQuestSource:
    """Build an ``InMemoryQuestSource`` from SPT-style JSON files.

    Raises
    ------
    SourceUnavailableError
        If the quest database or the profiles directory is missing.
    """
    quest_db = Path(quest_db)
    profiles_dir = Path(profiles_dir)
    if not quest_db.is_file():
        raise SourceUnavailableError(f"Quest database not found: {quest_db}")
    if not profiles_dir.is_dir():
        raise SourceUnavailableError(f"Profiles directory not found: {profiles_dir}")

    catalog = load_catalog(quest_db)

    profiles: list[ProfileRecord] = []
    statuses: dict[str, dict[str, RawStatus]] = {}
    for path in sorted(profiles_dir.glob("*.json")):
        try:
            record, profile_statuses = load_profile(path)
        except SourceUnavailableError as exc:
            logger.warning("Skipping profile file: %s", exc)
            continue
        profiles.append(record)
        statuses[record.profile_id] = profile_statuses

    locale = load_locale(Path(locale_path)) if locale_path else {}

    logger.info(
        "Loaded %d quests and %d profiles from %s",
        len(catalog),
        len(profiles),
        quest_db.parent,
    )
    return InMemoryQuestSource(catalog, profiles, statuses, locale)
