"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Database credentials only ever arrive through DATABASE_URL
    - get_settings() is cached: one Settings instance per process
    - The pool is bounded: pool_size + max_overflow connections at most,
      acquisition blocks for at most pool_timeout seconds
    - A plain postgresql:// URL is rewritten to the asyncpg dialect here, so
      the app and alembic/env.py agree on the driver
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNC_POSTGRES_PREFIX = "postgresql+asyncpg://"


def to_async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", ASYNC_POSTGRES_PREFIX, 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables (or .env)."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "postgresql+asyncpg://codify:codify@db:5432/codify"
    database_pool_size: int = Field(10, ge=1)
    database_max_overflow: int = Field(5, ge=0)
    database_pool_timeout: float = Field(30.0, gt=0)

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v):
        return to_async_url(v) if isinstance(v, str) else v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"  # "json" | "text"
    log_sql: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
