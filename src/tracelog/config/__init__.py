"""
Tracelog Configuration Module.

Each sub-module is an independent concern with its own environment variable
prefix, composed here into a single `settings` object.

Usage:
    from tracelog.config import settings

    settings.logging.directory      # "log"
    settings.logging.time_zone      # "Asia/Jakarta"
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingSettings


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


# Singleton instance
settings = Settings()

__all__ = ["Settings", "settings", "LoggingSettings"]
