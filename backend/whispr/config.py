"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - persistence_backend selects exactly one SnapshotBackend implementation

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: a bare `uvicorn whispr.main:app` works
      with the JSON file backend and no database
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Persistence
    persistence_backend: Literal["json", "database"] = "json"
    data_file: str = ".data/whispr-state.json"
    flush_debounce_ms: int = Field(250, ge=0)

    # Database (only used when persistence_backend == "database")
    database_url: str = (
        "postgresql+asyncpg://whispr:whispr@db:5432/whispr"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_create_tables: bool = False

    # Content rules
    reaction_cooldown_ms: int = Field(500, ge=0)
    crush_mutual_probability: float = Field(0.4, ge=0.0, le=1.0)
    seed_sample_data: bool = False

    # Realtime
    realtime_send_timeout_ms: int = Field(2000, gt=0)

    # API
    cors_origins: list[str] = ["http://localhost:8081"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
