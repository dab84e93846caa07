# src/commission_builder/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and an optional .env file.

Files that USE this module:
- commission_builder.app (loads settings for catalog sources, logging and export)
- commission_builder.adapters.catalog.source (HTTP timeout)
- commission_builder.adapters.persistence.file_store (state file location)
- commission_builder.adapters.export.pdf_exporter (export directory)

Files that this module USES:
- commission_builder.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from commission_builder.shared.validators import validate_log_level, validate_source


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Catalog sources (local path or http(s) URL) ---
    catalog_source: Optional[str] = Field(default=None, alias="CATALOG_SOURCE")
    theme_source: Optional[str] = Field(default=None, alias="THEME_SOURCE")

    # --- Wizard ---
    # When set, the wizard skips the type step and starts at subtype
    single_type_id: Optional[str] = Field(default=None, alias="SINGLE_TYPE_ID")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Persistence ---
    state_file: Path = Field(default=Path("./data/session_state.json"), alias="STATE_FILE")

    # --- Export ---
    export_dir: Path = Field(default=Path("./exports"), alias="EXPORT_DIR")
    export_filename: str = Field(default="commission-summary.pdf", alias="EXPORT_FILENAME")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def catalog_sources(self) -> list[str]:
        """Configured data sources, in load order (empty means built-in catalog)."""
        return [self.catalog_source] if self.catalog_source else []

    @property
    def export_path(self) -> Path:
        return self.export_dir / self.export_filename

    @field_validator("catalog_source", "theme_source")
    @classmethod
    def validate_source(cls, v: Optional[str]) -> Optional[str]:
        """Validate source format (blank values mean 'not configured')."""
        if v is None or not v.strip():
            return None
        if not validate_source(v):
            raise ValueError("Catalog sources must be a file path or an http(s) URL")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        if not validate_log_level(v):
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return v.upper()


# Global settings instance
settings = Settings()
