"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Connection strings come from the environment (.env honoured), never from code
    - get_settings() is cached: one Settings instance per process
    - database_url is always an async driver URL

Design Decisions:
    - Listing limits are settings, not constants: operators tune history depth
      without a deploy
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SYNC_TO_ASYNC_SCHEMES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
}


class Settings(BaseSettings):
    """TeamBuilder settings; every field overridable by an env var of the same name."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    database_url: str = "postgresql+asyncpg://teambuilder:teambuilder@db:5432/teambuilder"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    chat_history_limit: int = Field(100, ge=1, le=1000)
    invitation_list_limit: int = Field(200, ge=1, le=1000)

    cors_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosting platforms hand out sync URLs; the engine needs asyncpg."""
        if isinstance(v, str):
            for sync, async_ in _SYNC_TO_ASYNC_SCHEMES.items():
                if v.startswith(sync):
                    return async_ + v[len(sync):]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
