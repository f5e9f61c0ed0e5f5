"""
Larder - Configuration and settings.

All settings come from environment variables or a local .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LarderSettings(BaseSettings):
    """
    Application settings.

    The fetch proxy is only used when both its URL and key are set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Optional scraping proxy, tried ahead of the direct fetch
    scraper_proxy_url: str = ""
    scraper_proxy_key: str = Field(
        default="",
        validation_alias=AliasChoices("scraper_proxy_key", "scraping_api_key"),
    )

    # Reader proxy (readable-text fallback)
    reader_base_url: str = "https://r.jina.ai"

    http_timeout_seconds: float = 15.0

    # Domain selector store
    selector_store: Literal["memory", "supabase"] = "memory"
    supabase_url: str | None = None
    supabase_key: str | None = None

    # Application
    larder_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def proxy_enabled(self) -> bool:
        return bool(self.scraper_proxy_url and self.scraper_proxy_key)


@lru_cache
def get_settings() -> LarderSettings:
    """Get cached settings instance."""
    return LarderSettings()


# Convenience singleton - lazy loaded
class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: LarderSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
