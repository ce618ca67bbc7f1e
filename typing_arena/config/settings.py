import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using absolute path for SQLite to avoid path resolution issues."""
    db_url = os.getenv("TYPING_ARENA_DATABASE_URL", "")
    if db_url:
        logger.info(f"Using TYPING_ARENA_DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "typing_arena.db"
    abs_path = db_path.resolve()
    db_url = f"sqlite:///{abs_path}"
    logger.debug(f"Using default database path: {db_url}")
    return db_url


def get_corpus_path() -> str:
    """Default corpus location: data/passages.json under the project root."""
    return str((Path(__file__).parent.parent.parent / "data" / "passages.json").resolve())


class Settings(BaseSettings):
    database_url: str = Field(default_factory=get_database_url)
    corpus_path: str = Field(default_factory=get_corpus_path)
    log_level: str = Field(default="INFO")
    log_file: str | None = Field(default=None)

    participant_name: str = Field(default="", description="Display name written with every score")

    # Round timing
    countdown_start: int = Field(default=3, ge=0)
    countdown_interval_seconds: float = Field(default=0.7, gt=0)

    # Persistence
    save_cooldown_seconds: float = Field(
        default=15.0,
        ge=0,
        description="Completions within this window of the previous saved one are not persisted",
    )
    leaderboard_limit: int = Field(default=10, gt=0)
    history_fetch_limit: int = Field(default=300, gt=0)

    # Selection
    recent_pool_size: int = Field(default=10, gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("participant_name")
    @classmethod
    def strip_participant_name(cls, value: str) -> str:
        return value.strip()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TYPING_ARENA_",
        extra="ignore",
    )


settings = Settings()
