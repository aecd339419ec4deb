# redislock/config/settings.py

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LockSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REDISLOCK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    environment: Literal["dev", "test", "prod"] = "dev"

    # --- Redis ---
    redis_url: str = "redis://localhost:6379/0"
    socket_timeout_seconds: float | None = Field(default=5.0, gt=0)

    # --- Locking ---
    key_prefix: str = Field(default="redislock", min_length=1)
    lease_ttl_seconds: int = Field(default=600, gt=0)

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> LockSettings:
    return LockSettings()
