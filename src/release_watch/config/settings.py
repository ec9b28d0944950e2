"""Application settings with environment variable support."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pathlib import Path


# Compute base_dir at module level
_BASE_DIR = Path(__file__).parent.parent.parent.parent.resolve()

DEFAULT_FEED_URL = "https://developers.google.com/feeds/google-ads-api-release-notes.xml"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RW_",  # RW_FEED_URL, RW_SLACK_WEBHOOK_URL, etc.
    )

    # Paths - computed from base_dir
    base_dir: Path = _BASE_DIR
    data_dir: Path = _BASE_DIR / "data"
    logs_dir: Path = _BASE_DIR / "logs"

    # Database
    database_url: str = f"sqlite:///{_BASE_DIR / 'data' / 'release_notes.db'}"

    # Feed
    feed_url: str = DEFAULT_FEED_URL
    feed_name: str = "Google Ads API release notes"
    parser: str = "regex"  # "regex" or "feedparser"

    # Ingestion
    fetch_timeout_seconds: int = 30
    user_agent: str = "ReleaseWatchBot/1.0"

    # Notifications
    slack_webhook_url: Optional[str] = None
    notify_timeout_seconds: int = 10

    # Schedule (consumed by scripts/worker.py)
    check_cron: str = "0 0 * * *"  # 00:00 UTC = 09:00 JST
    check_timezone: str = "UTC"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
