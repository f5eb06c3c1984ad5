"""Engine configuration — env-driven via pydantic-settings.

Reads from a .env file and QUESTLOCK_* environment variables.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineConfig(BaseSettings):
    """Tunables for the prerequisite cache and the status resolver.

    Examples
    --------
    Override via environment::

        export QUESTLOCK_CACHE_TTL_SECONDS=60
        export QUESTLOCK_MAX_TRAVERSAL_DEPTH=200
        export QUESTLOCK_PROMOTE_SATISFIED_LOCKED=false

    Or via .env file::

        QUESTLOCK_LOG_LEVEL=DEBUG
        QUESTLOCK_VISIBLE_PROFILES=*,-Scav
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QUESTLOCK_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Prerequisite graph cache
    cache_ttl_seconds: float = 300.0

    # Blocker-chain traversal
    max_traversal_depth: int = 500

    # Promote Locked quests whose quest prerequisites are all complete to
    # Available. Cannot tell a stale Locked apart from a level/reputation lock.
    promote_satisfied_locked: bool = True

    # Profiles whose id starts with one of these are system/bot profiles
    excluded_profile_prefixes: list[str] = ["headless_", "bot_"]

    # Viewer-side filter: "*", "Player1,Player2" or "*,-Name"
    visible_profiles: str = "*"

    log_level: str = "INFO"


# Module-level singleton — import as `from questlock.config import config`
config = EngineConfig()
