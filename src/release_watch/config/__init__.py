"""Configuration - environment-driven settings."""

from .settings import Settings, settings, DEFAULT_FEED_URL

__all__ = ["Settings", "settings", "DEFAULT_FEED_URL"]
