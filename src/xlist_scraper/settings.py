"""
Server settings for the xlist-scraper HTTP surface.
Loads environment variables (and an optional .env file) into an explicit object
that is handed to the app factory instead of living as module state.
"""
from typing import List, Optional

from pydantic_settings import BaseSettings

from xlist_scraper.config import ScrapeOptions

AUTH_MODES = ("off", "optional", "required")


class ServerSettings(BaseSettings):
    """Server settings loaded from environment variables."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: str = "*"
    log_level: str = "INFO"

    # Scraping defaults applied to every request
    concurrency: int = 1
    headless: bool = True
    persist_cookies_path: Optional[str] = None  # Cookie jar shared by all targets (last writer wins)
    proxy: Optional[str] = None

    # Bearer auth: off | optional | required
    auth_mode: str = "off"
    auth_token: Optional[str] = None

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS origins string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def normalized_auth_mode(self) -> str:
        mode = self.auth_mode.strip().lower()
        return mode if mode in AUTH_MODES else "off"

    def to_scrape_options(self, **overrides) -> ScrapeOptions:
        """Build validated scrape options from server defaults plus per-request overrides."""
        base = ScrapeOptions(
            headless=self.headless,
            cookies_path=self.persist_cookies_path or None,
            proxy=self.proxy or None,
            concurrency=self.concurrency,
        )
        return base.merged(**overrides)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
