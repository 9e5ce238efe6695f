"""
Configuration helpers for the teamhub backend.

Settings are read once from environment variables and cached; tests call
``get_settings.cache_clear()`` after patching the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: str
    log_level: str
    cors_origins: tuple[str, ...]
    join_code_length: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip().rstrip("/") for item in value.split(",") if item.strip())

    join_code_length = _int(os.getenv("JOIN_CODE_LENGTH", "6"), 6)
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=os.getenv("DATA_DIR") or "./data",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
        join_code_length=join_code_length if join_code_length > 0 else 6,
    )
