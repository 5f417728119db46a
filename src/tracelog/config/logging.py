"""
Logging Configuration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Defaults applied when a logger is built without explicit overrides."""

    model_config = SettingsConfigDict(
        env_prefix="TRACELOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    directory: str = Field(default="log", description="Log directory used when none is given")
    time_zone: str = Field(default="Asia/Jakarta", description="IANA time zone for timestamps and file names")
    time_format: str = Field(default="%Y/%m/%d %H:%M:%S", description="Record timestamp format")
    file_date_format: str = Field(default="%Y-%m-%d", description="Date part of the log file name")
    file_extension: str = Field(default="log", description="Log file suffix")
    sampling_initial: int = Field(default=100, ge=1, description="Records per key and tick logged verbatim")
    sampling_thereafter: int = Field(default=100, ge=1, description="Keep every Nth record once initial is exceeded")
    sampling_tick: float = Field(default=1.0, gt=0, description="Sampling interval in seconds")
