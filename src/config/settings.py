"""
Dice Duel - Application Settings

Loads configuration from environment variables using Pydantic Settings,
and applies the logging configuration derived from it.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from src.engine.validators import validate_starting_dice

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Game defaults
    default_starting_dice: list[int] = [4, 6, 8, 10, 20]
    latest_games_limit: int = Field(10, ge=1)

    # Randomness; set for reproducible sessions
    rng_seed: int | None = None

    # Realtime
    poll_interval: float = Field(2.0, gt=0)

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @field_validator("default_starting_dice")
    @classmethod
    def _check_starting_dice(cls, value: list[int]) -> list[int]:
        return list(validate_starting_dice(value))

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
