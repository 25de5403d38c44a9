from __future__ import annotations

from functools import cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from db.db import DEFAULT_DATABASE_URL
from domain.relay_ledger import StaleRelayPolicy


class AppSettings(BaseSettings):
    database_url: str = DEFAULT_DATABASE_URL
    stale_relay_policy: StaleRelayPolicy = StaleRelayPolicy.SKIP
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ORACLE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
