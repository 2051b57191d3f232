"""
Configuration helpers for the sweets API.

Routers/resources never read os.environ directly; they receive a Settings
instance built from the environment by get_settings().
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    api_prefix: str
    base_url: str
    host: str
    port: int
    log_level: str
    log_format: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./sweets.db").strip(),
        api_prefix=os.getenv("API_PREFIX", "v0").strip("/"),
        base_url=os.getenv("BASE_URL", "").rstrip("/"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "31415"), 31415),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_format=(os.getenv("LOG_FORMAT") or "text").lower(),
    )
