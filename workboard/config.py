"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): one Settings per process
    - Defaults match the docker-compose stack; every value can be overridden by env or .env
    - Numeric limits are validated at startup, not at first use

Design Decisions:
    - pydantic-settings over raw os.environ: type coercion and validation in one place
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Store
    database_url: str = "postgresql+asyncpg://workboard:workboard@db:5432/workboard"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # Notification inbox page size
    notification_list_limit: int = Field(20, ge=1, le=200)

    # Live fan-out: per-connection queue bound and idle keep-alive interval
    live_queue_size: int = Field(100, ge=1)
    live_keepalive_seconds: float = Field(15.0, gt=0)

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// URLs; the engine needs asyncpg."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
