"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - rng_seed is read once at startup; the random source is never re-seeded per call

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - CARDCZAR_ env prefix: avoids clashing with other services on the same host
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from cardczar.core.domain_types import MAX_BLANKS, MAX_CARD_TEXT_LENGTH


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CARDCZAR_", case_sensitive=False,
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://cardczar:cardczar@db:5432/cardczar"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Game state store: "sql" persists to database_url, "memory" is per-process
    store_backend: Literal["memory", "sql"] = "sql"

    # Randomness (None = seeded from OS entropy)
    rng_seed: int | None = None

    # Game rules
    min_black_cards: int = 8
    min_white_cards: int = 34

    # User id of the auto-play scheduler allowed to play-random for any seat
    scheduler_user_id: str | None = None

    # Card catalog (text length is capped by the cards.text column size)
    max_card_text_length: int = Field(MAX_CARD_TEXT_LENGTH, ge=1, le=MAX_CARD_TEXT_LENGTH)
    max_blanks: int = MAX_BLANKS

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
