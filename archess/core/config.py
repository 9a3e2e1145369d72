"""
Process configuration, loaded from environment variables (prefix ARCHESS_) or a .env file.

Usage:
    from archess.core.config import get_settings

    settings = get_settings()
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from archess.core.shared_types import CombatMode

IN_MEMORY_DATABASE_URL = "sqlite:///:memory:"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ARCHESS_", env_file=".env", extra="ignore"
    )

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=4000, description="Server port")
    cors_origins: list[str] = Field(default=["http://localhost:3000"])

    # Match data is memory-resident: the default database lives and dies with the process.
    database_url: str = IN_MEMORY_DATABASE_URL

    board_width: int = Field(default=5, ge=4)
    board_height: int = Field(default=5, ge=2)
    combat_mode: CombatMode = CombatMode.IMMEDIATE

    match_max_age_seconds: float = Field(default=24 * 60 * 60, gt=0)
    sweep_interval_seconds: float = Field(default=60 * 60, gt=0)

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
