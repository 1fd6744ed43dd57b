"""
Kochbuch - Configuration and settings.

ImportSettings holds everything the recipe importer reads from the
environment (or a local .env file).
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ImportSettings(BaseSettings):
    """
    Recipe importer settings.

    All fields can be overridden through environment variables of the
    same name (case-insensitive), e.g. KOCHBUCH_FETCH_TIMEOUT=10.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    kochbuch_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Fetching
    kochbuch_fetch_timeout: float = 20.0  # seconds, one attempt per strategy
    kochbuch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    kochbuch_accept_language: str = "de-DE,de;q=0.9,en;q=0.8"

    # Generic HTML heuristics
    kochbuch_max_html_items: int = 20

    @property
    def is_development(self) -> bool:
        return self.kochbuch_env == "development"

    @property
    def is_production(self) -> bool:
        return self.kochbuch_env == "production"


@lru_cache
def get_settings() -> ImportSettings:
    """Get cached settings instance."""
    return ImportSettings()


# Convenience singleton - lazy loaded
class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: ImportSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
