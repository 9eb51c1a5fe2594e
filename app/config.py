# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.MAPPING_CONFIDENCE_THRESHOLD)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The import pipeline itself never reads settings: the API builds a
# DetectionConfig from them (see Settings.detection_config) and passes it in.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import DetectionConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Optional - without them confirmed imports cannot be persisted, but
    # preview, validation and export still work

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS)"
    )

    IMPORT_TABLE: str = Field(
        default="imported_data",
        description="Table that receives confirmed import rows"
    )

    # -------------------------------------------------------------------------
    # Import Limits
    # -------------------------------------------------------------------------

    MAX_IMPORT_ROWS: int = Field(
        default=50_000,
        ge=1,
        description="Maximum number of rows accepted in a single request"
    )

    # -------------------------------------------------------------------------
    # Detection Heuristics
    # -------------------------------------------------------------------------
    # Defaults match DetectionConfig

    MAPPING_CONFIDENCE_THRESHOLD: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Columns are mapped only above this confidence"
    )

    NAME_MATCH_CONFIDENCE: float = Field(default=0.8, ge=0.0, le=1.0)

    VALUE_FALLBACK_FACTOR: float = Field(default=0.6, ge=0.0, le=1.0)

    AGREEMENT_BOOST: float = Field(default=0.15, ge=0.0, le=1.0)

    MAX_CONFIDENCE: float = Field(default=0.95, ge=0.0, le=1.0)

    SAMPLE_ROWS: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Rows sampled per column for value-based detection"
    )

    PREVIEW_ROWS: int = Field(
        default=10,
        ge=0,
        le=1000,
        description="Raw and transformed rows included in a preview"
    )

    MAPPING_COLLISION_POLICY: Literal["last_applied", "highest_confidence"] = Field(
        default="last_applied",
        description="Which mapping wins when two columns map to the same field"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def detection_config(self) -> DetectionConfig:
        """Detection heuristics for the import pipeline."""
        return DetectionConfig(
            mapping_threshold=self.MAPPING_CONFIDENCE_THRESHOLD,
            name_match_confidence=self.NAME_MATCH_CONFIDENCE,
            value_fallback_factor=self.VALUE_FALLBACK_FACTOR,
            agreement_boost=self.AGREEMENT_BOOST,
            max_confidence=self.MAX_CONFIDENCE,
            sample_rows=self.SAMPLE_ROWS,
            preview_rows=self.PREVIEW_ROWS,
            collision_policy=self.MAPPING_COLLISION_POLICY,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
