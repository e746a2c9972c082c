"""
Configuration settings for the Character DMS.

Uses Pydantic Settings to load environment variables for logging, the
default data file and report defaults.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Data
    data_file: Optional[Path] = Field(None, alias="DMS_DATA_FILE")
    export_dir: Path = Field(Path("reports"), alias="DMS_EXPORT_DIR")

    # Report defaults
    default_top_n: int = Field(10, alias="DMS_TOP_N", ge=0)
    report_include_archived: bool = Field(False, alias="DMS_REPORT_INCLUDE_ARCHIVED")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
