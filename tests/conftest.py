"""Shared test fixtures for Questlock."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from questlock.config import EngineConfig
from questlock.core.prerequisite_graph import PrerequisiteGraphCache
from questlock.core.status_resolver import StatusResolver
from questlock.models.quests import ProfileRecord, Quest, QuestCondition
from questlock.sources.memory import InMemoryQuestSource


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _make_quest(quest_id: str, *requires: str, name: str | None = None) -> Quest:
    """Build a quest whose start conditions require each of *requires*."""
    return Quest(
        id=quest_id,
        raw_name=name,
        available_for_start=[
            QuestCondition(condition_type="Quest", target=required)
            for required in requires
        ],
    )


@pytest.fixture
def make_quest() -> Callable[..., Quest]:
    """Factory fixture: build a quest from its id and required quest ids."""
    return _make_quest


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine config, isolated from the environment and .env files."""
    return EngineConfig(_env_file=None)


@pytest.fixture
def player() -> ProfileRecord:
    return ProfileRecord(profile_id="pmc-001", display_name="Luna")


@pytest.fixture
def chain_catalog() -> list[Quest]:
    """Q3 requires Q2 requires Q1; Q1 has no prerequisites."""
    return [
        _make_quest("Q1", name="Debut"),
        _make_quest("Q2", "Q1", name="Shooting Cans"),
        _make_quest("Q3", "Q2", name="Luxurious Life"),
    ]


@pytest.fixture
def make_source(
    player: ProfileRecord,
) -> Callable[..., InMemoryQuestSource]:
    """Factory fixture: an in-memory source with one player by default."""

    def _factory(
        catalog: list[Quest],
        statuses: dict[str, Any] | None = None,
        *,
        profiles: list[ProfileRecord] | None = None,
        locale: dict[str, str] | None = None,
    ) -> InMemoryQuestSource:
        profiles = profiles if profiles is not None else [player]
        return InMemoryQuestSource(
            catalog,
            profiles,
            {profile.profile_id: dict(statuses or {}) for profile in profiles},
            locale,
        )

    return _factory


@pytest.fixture
def make_resolver(
    engine_config: EngineConfig, clock: FakeClock
) -> Callable[..., StatusResolver]:
    """Factory fixture: a resolver over *source* with a fake-clock cache."""

    def _factory(source: InMemoryQuestSource, **overrides: Any) -> StatusResolver:
        config = engine_config.model_copy(update=overrides)
        cache = PrerequisiteGraphCache(config.cache_ttl_seconds, clock=clock)
        return StatusResolver(source, config, cache)

    return _factory


@pytest.fixture
def resolve(
    make_resolver: Callable[..., StatusResolver],
    player: ProfileRecord,
) -> Callable[..., Any]:
    """Resolve a catalog for the default player and return their quest map."""

    def _resolve(source: InMemoryQuestSource, **overrides: Any):
        resolver = make_resolver(source, **overrides)
        report = resolver.resolve_all(source.get_profiles(), source.get_catalog())
        return report.profiles[player.display_name]

    return _resolve


# ---------------------------------------------------------------------------
# On-disk SPT-style data — shared by loader, CLI and integration tests
# ---------------------------------------------------------------------------

DEBUT = "5936d90786f7742b1420ba5b"
SHOOTING_CANS = "5936da9e86f7742d65037edf"
LUXURIOUS_LIFE = "5967530a86f77462ba22226b"
LEVEL_LOCKED = "59674cd986f7744ab26e32f2"


def _quest_entry(quest_id: str, quest_name: str, *requires: str) -> dict[str, Any]:
    conditions: list[dict[str, Any]] = [
        {"conditionType": "Level", "value": 5, "compareMethod": ">="},
    ]
    conditions.extend(
        {"conditionType": "Quest", "target": required, "status": [4]}
        for required in requires
    )
    return {
        "_id": quest_id,
        "QuestName": quest_name,
        "conditions": {"AvailableForStart": conditions},
    }


def _profile_entry(profile_id: str, nickname: str | None, quests: dict[str, Any]) -> dict[str, Any]:
    info: dict[str, Any] = {} if nickname is None else {"Nickname": nickname}
    return {
        "info": {"id": profile_id, "username": profile_id},
        "characters": {
            "pmc": {
                "_id": f"pmc{profile_id}",
                "Info": info,
                "Quests": [{"qid": qid, "status": status} for qid, status in quests.items()],
            }
        },
    }


@pytest.fixture
def spt_data(tmp_path: Path) -> dict[str, Path]:
    """Write a quest database, three profiles and a locale file to disk.

    Luna has finished Debut; Sol has nothing done; bot_ is a system profile.
    """
    quests = {
        DEBUT: _quest_entry(DEBUT, "Debut"),
        SHOOTING_CANS: _quest_entry(SHOOTING_CANS, "Shooting Cans", DEBUT),
        LUXURIOUS_LIFE: _quest_entry(LUXURIOUS_LIFE, "Name", SHOOTING_CANS),
        LEVEL_LOCKED: _quest_entry(LEVEL_LOCKED, "Level Gate"),
    }
    quest_db = tmp_path / "quests.json"
    quest_db.write_text(json.dumps(quests), encoding="utf-8")

    profiles_dir = tmp_path / "profiles"
    profiles_dir.mkdir()
    for profile_id, nickname, statuses in [
        ("aaa111", "Luna", {DEBUT: 4, SHOOTING_CANS: "Started"}),
        ("bbb222", "Sol", {DEBUT: 2}),
        ("bot_333", "Scav", {}),
    ]:
        (profiles_dir / f"{profile_id}.json").write_text(
            json.dumps(_profile_entry(profile_id, nickname, statuses)), encoding="utf-8"
        )

    locale = tmp_path / "en.json"
    locale.write_text(
        json.dumps({
            f"{DEBUT} name": "Debut",
            f"{SHOOTING_CANS} name": "Shooting Cans",
            f"{LUXURIOUS_LIFE} name": "Luxurious Life",
            f"{DEBUT} description": "Kill 5 scavs",
        }),
        encoding="utf-8",
    )
    return {"quest_db": quest_db, "profiles_dir": profiles_dir, "locale": locale}
