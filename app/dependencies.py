# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the import boundaries.
# These are injected into route handlers using Depends(), and overridden in
# tests with app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.models import DetectionConfig
from lib.sinks import CsvTemplateEmitter, RowSink, SupabaseRowSink, TemplateEmitter
from lib.supabase_client import SupabaseClient


def get_detection_config() -> DetectionConfig:
    """Detection heuristics built from settings."""
    return settings.detection_config


def get_row_sink() -> RowSink | None:
    """
    Get the sink for confirmed imports.

    Returns None when Supabase is not configured.
    """
    if not SupabaseClient.is_configured():
        return None
    return SupabaseRowSink(table=settings.IMPORT_TABLE)


def get_template_emitter() -> TemplateEmitter:
    """Get the import template generator."""
    return CsvTemplateEmitter()


# Type aliases for dependency injection
DetectionConfigDep = Annotated[DetectionConfig, Depends(get_detection_config)]
RowSinkDep = Annotated[RowSink | None, Depends(get_row_sink)]
TemplateEmitterDep = Annotated[TemplateEmitter, Depends(get_template_emitter)]
