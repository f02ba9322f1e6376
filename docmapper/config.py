"""Store Configuration — DOCMAPPER_* environment settings via pydantic-settings.

Invariants:
    - Every setting can be overridden by a DOCMAPPER_* environment variable
    - get_settings() is cached (lru_cache) — single instance per process
    - store_url always names an async driver (postgresql:// is rewritten)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box with a local SQLite file; pool sizing only
      matters for server databases
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection, schema and logging options read by docmapper.lifecycle.connect()."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="DOCMAPPER_", case_sensitive=False,
        extra="ignore",
    )

    # Document store
    store_url: str = "sqlite+aiosqlite:///docmapper.db"
    store_pool_size: int = 20
    store_max_overflow: int = 10
    store_echo: bool = False
    create_schema_on_connect: bool = True

    # Observability
    configure_logging: bool = False
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("store_url", mode="before")
    @classmethod
    def use_async_postgres_driver(cls, v: str) -> str:
        """postgresql:// URLs get the asyncpg driver the async engine needs."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
