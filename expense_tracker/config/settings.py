"""
Configuration Management for the Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. Every setting has a
default, so the core runs without any environment configured; variables
prefixed with EXPENSE_TRACKER_ (or a .env file) override them.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_STORAGE_KEY = "expense-tracker-data"


class StorageSettings(BaseSettings):
    """Key-value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="file",
        pattern="^(memory|file)$",
        description="Key-value store backend"
    )
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding one JSON file per storage key (file backend)"
    )
    key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Key under which the expense collection is stored"
    )
    quota_bytes: Optional[int] = Field(
        default=None,
        ge=1,
        description="Optional size limit for the in-memory backend"
    )


class ExportSettings(BaseSettings):
    """Export serializer configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_EXPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    filename_prefix: str = Field(
        default="expenses",
        min_length=1,
        description="Prefix of generated filenames: <prefix>-<YYYY-MM-DD>.<ext>"
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of the JSON export"
    )
    pdf_title: str = Field(
        default="Expense Report",
        description="Title printed at the top of PDF exports"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    min_description_length: int = Field(
        default=3,
        ge=1,
        le=100,
        description="Minimum description length accepted by the entry form"
    )
    recent_expenses_limit: int = Field(
        default=5,
        ge=1,
        description="How many expenses the 'recent' view shows"
    )
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="How many audit events are kept in memory"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
